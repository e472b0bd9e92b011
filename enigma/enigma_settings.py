import json

from enigma import ALPHABET, N_LETTERS, EnigmaMachine, PlugBoard, Rotor
import known_parts


class SettingsError(ValueError):
    pass


class MachineSettings:
    """
    a complete key for a 3 rotor machine.
    rotors are given left (slow) to right (fast); ring settings and positions are 0-based.
    """
    def __init__(self, rotors=('I', 'II', 'III'), reflector='B', ring_settings=(0, 0, 0),
                 positions=(0, 0, 0), plugboard=()):
        if isinstance(rotors, str):
            rotors = rotors.split()
        self.rotors = [str(name).upper() for name in rotors]
        if len(self.rotors) != 3:
            raise SettingsError(f'need exactly 3 rotors, got {len(self.rotors)}')
        self.reflector = str(reflector).upper()
        self.ring_settings = parse_letters_or_numbers(ring_settings, 'ring settings')
        self.positions = parse_letters_or_numbers(positions, 'positions')
        self.plugboard = parse_plug_pairs(plugboard)

    def to_dict(self) -> dict:
        return {
            'rotors': self.rotors,
            'reflector': self.reflector,
            'ring_settings': ''.join(ALPHABET[i] for i in self.ring_settings),
            'positions': ''.join(ALPHABET[i] for i in self.positions),
            'plugboard': [a + b for a, b in self.plugboard],
        }

    def __repr__(self):
        return f'<MachineSettings {self.to_dict()}>'


def parse_letters_or_numbers(values, what: str = 'values') -> list:
    """
    'AAZ', ['A', 'A', 'Z'] and [0, 0, 25] all give [0, 0, 25]
    """
    if isinstance(values, str):
        values = list(values.replace(' ', ''))
    result = []
    for value in values:
        if isinstance(value, str):
            value = value.upper()
            if len(value) != 1 or value not in ALPHABET:
                raise SettingsError(f'invalid letter {value!r} in {what}')
            result.append(ALPHABET.index(value))
        elif isinstance(value, int) and 0 <= value < N_LETTERS:
            result.append(value)
        else:
            raise SettingsError(f'invalid value {value!r} in {what}, expected A-Z or 0-{N_LETTERS - 1}')
    if len(result) != 3:
        raise SettingsError(f'need 3 {what}, got {len(result)}')
    return result


def parse_plug_pairs(pairs) -> list:
    if isinstance(pairs, str):
        pairs = pairs.split()
    used = set()
    result = []
    for raw in pairs:
        if len(raw) != 2:
            raise SettingsError(f'plug pair {raw!r} must be exactly 2 letters')
        first, second = (str(letter).upper() for letter in raw)
        for letter in (first, second):
            if len(letter) != 1 or letter not in ALPHABET:
                raise SettingsError(f'invalid letter {letter!r} in plug pair {raw!r}')
        if first == second:
            raise SettingsError(f'plug board cannot connect a letter to itself: {first}')
        if first in used or second in used:
            dup = first if first in used else second
            raise SettingsError(f'letter {dup!r} already used in plug board')
        used.update((first, second))
        result.append((first, second))
    return result


def settings_from_dict(cfg: dict) -> MachineSettings:
    kwargs = {}
    for key, aliases in (('rotors', ()),
                         ('reflector', ()),
                         ('ring_settings', ('ring_set', 'rings')),
                         ('positions', ('start_positions',)),
                         ('plugboard', ('plugs',))):
        for name in (key,) + aliases:
            if name in cfg:
                kwargs[key] = cfg[name]
                break
    return MachineSettings(**kwargs)


def load_settings(path) -> MachineSettings:
    try:
        with open(path, 'r', encoding='utf-8') as file_:
            cfg = json.load(file_)
    except (OSError, json.JSONDecodeError) as err:
        raise SettingsError(f'cannot read settings from {path}: {err}') from err
    if not isinstance(cfg, dict):
        raise SettingsError(f'settings file {path} must contain a JSON object')
    return settings_from_dict(cfg)


def build_machine(settings: MachineSettings) -> EnigmaMachine:
    try:
        wirings = [known_parts.physical_rotor(name) for name in settings.rotors]
        reflector = known_parts.build_reflector(settings.reflector)
    except ValueError as err:
        raise SettingsError(str(err)) from err

    rotors = [Rotor(wiring, ring, pos)
              for wiring, ring, pos in zip(wirings, settings.ring_settings, settings.positions)]
    return EnigmaMachine(*rotors, reflector, PlugBoard(settings.plugboard))
