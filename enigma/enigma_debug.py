import logging

COMPONENTS = ('keyboard', 'stepping', 'plugboard', 'rotor', 'reflector', 'lampboard', 'search')


class Debug:
    """
    per-component switches in front of the 'enigma' logger.
    messages of a component only reach the logger while that component is enabled.
    """
    _root_configured = False

    def __init__(self, name: str = 'enigma'):
        self.logger = logging.getLogger(name)
        self.enabled = True
        self.components = {component: False for component in COMPONENTS}

    @classmethod
    def setup(cls, level=logging.DEBUG, log_to: str = None):
        """
        configure the root handlers once per process.
        if `log_to` is given, messages also go to that file
        """
        if cls._root_configured:
            return
        handlers = [logging.StreamHandler()]
        if log_to:
            handlers.append(logging.FileHandler(log_to, encoding='utf-8'))
        logging.basicConfig(
            level=level,
            format='[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
            handlers=handlers,
        )
        cls._root_configured = True

    def log(self, component: str, message: str):
        if self.enabled and self.components.get(component, False):
            self.logger.debug('[%s] %s', component.upper(), message)

    def enable(self, *components: str):
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str):
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle(self, component: str):
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool):
        self.enabled = state

    def status(self) -> dict:
        return self.components.copy()

    def _require(self, component: str):
        if component not in self.components:
            raise ValueError(f'No such component: {component!r}')

    def __repr__(self):
        active = [k for k, v in self.components.items() if v]
        return f'<Debug enabled={self.enabled} active={active}>'
