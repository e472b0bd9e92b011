import enum
import string

from enigma_debug import Debug

ALPHABET = string.ascii_uppercase
N_LETTERS = len(ALPHABET)
SENTINEL = '*'

debug = Debug()


class InvalidCharacter(ValueError):
    def __init__(self, character):
        super().__init__(f'Cannot process character {character!r}')
        self.character = character


class Direction(enum.Enum):
    FORWARD = 'forward'
    BACKWARD = 'backward'


def letter_to_index(letter: str) -> int:
    if not (isinstance(letter, str) and len(letter) == 1 and letter in ALPHABET):
        raise InvalidCharacter(letter)
    return ord(letter) - ord('A')


def index_to_letter(index: int) -> str:
    return ALPHABET[index % N_LETTERS]


def _wiring_to_indices(wiring) -> list:
    if isinstance(wiring, str):
        indices = [ALPHABET.find(char) for char in wiring.upper()]
    else:
        indices = [int(el) for el in wiring]
    if sorted(indices) != list(range(N_LETTERS)):
        raise ValueError(f'wiring {wiring!r} is not a permutation of the alphabet')
    return indices


class WiringTable:
    """
    the fixed wiring of one physical rotor type.
    forward[i] is the contact that entry contact i is wired to, backward is the inverse permutation.
    """
    def __init__(self, name: str, wiring, notches):
        self.name = name
        if isinstance(notches, int):
            notches = (notches,)
        self.notches = tuple(int(n) for n in notches)
        if not self.notches or any(not 0 <= n < N_LETTERS for n in self.notches):
            raise ValueError(f'notches of rotor {name} must lie in [0, {N_LETTERS})')

        forward = _wiring_to_indices(wiring)
        backward = N_LETTERS * [0]
        for i, wired in enumerate(forward):
            backward[wired] = i

        self.forward = tuple(forward)
        self.backward = tuple(backward)

    def __repr__(self):
        return f'<WiringTable {self.name} notches={self.notches}>'


class Reflector:
    def __init__(self, name: str, wiring):
        self.name = name
        self.wiring = tuple(_wiring_to_indices(wiring))

    def reflect(self, letter: str) -> str:
        return ALPHABET[self.wiring[letter_to_index(letter)]]

    def __repr__(self):
        return f'<Reflector {self.name}>'


class PlugBoard:
    def __init__(self, pairs=None):
        self._pairs = [tuple(pair) for pair in (pairs or [])]

    @property
    def pairs(self) -> list:
        return list(self._pairs)

    def add_pair(self, first: str, second: str):
        self._pairs.append((first, second))

    def remove_pair(self, first: str, second: str):
        for pair in self._pairs:
            if pair in ((first, second), (second, first)):
                self._pairs.remove(pair)
                return
        raise ValueError(f'plug board has no connection {first}{second}')

    def plugged_letters(self) -> set:
        return {letter for pair in self._pairs for letter in pair}

    def swap(self, letter: str) -> str:
        # at most one swap per call
        for first, second in self._pairs:
            if letter == first:
                return second
            if letter == second:
                return first
        return letter

    def __repr__(self):
        return f"<PlugBoard {' '.join(a + b for a, b in self._pairs)}>"


class Rotor:
    def __init__(self, wiring: WiringTable, ring_setting: int = 0, position: int = 0):
        self.wiring = wiring
        self.ring_setting = ring_setting % N_LETTERS
        self.position = position % N_LETTERS

    def encipher(self, letter: str, direction: Direction) -> str:
        number = letter_to_index(letter)
        table = self.wiring.forward if direction is Direction.FORWARD else self.wiring.backward

        # offset of the wiring core against the stationary contacts
        shift = (self.position - self.ring_setting) % N_LETTERS
        wired = table[(number + shift) % N_LETTERS]
        return ALPHABET[(wired - shift) % N_LETTERS]

    def is_at_notch(self) -> bool:
        return self.position in self.wiring.notches

    def rotate(self):
        self.position = (self.position + 1) % N_LETTERS

    def set_position(self, pos: int):
        self.position = pos % N_LETTERS

    def get_position(self) -> str:
        return ALPHABET[self.position]

    def __repr__(self):
        return f'<Rotor {self.wiring.name} ring={self.ring_setting} pos={self.get_position()}>'


class EnigmaMachine:
    def __init__(self, rotor_left: Rotor, rotor_middle: Rotor, rotor_right: Rotor, reflector: Reflector,
                 plugboard: PlugBoard = None):
        self.rotor_left = rotor_left
        self.rotor_middle = rotor_middle
        self.rotor_right = rotor_right
        self.reflector = reflector
        self.plugboard = plugboard if plugboard is not None else PlugBoard()

    @property
    def rotors(self) -> list:
        return [self.rotor_left, self.rotor_middle, self.rotor_right]

    def step_rotors(self):
        # both notch checks see the positions from before this key press
        if self.rotor_middle.is_at_notch():
            self.rotor_middle.rotate()
            self.rotor_left.rotate()
        elif self.rotor_right.is_at_notch():
            self.rotor_middle.rotate()
        self.rotor_right.rotate()

    def rotor_positions(self) -> str:
        return ''.join(rot.get_position() for rot in self.rotors)

    def set_rotor_positions(self, positions):
        if len(positions) != 3:
            raise ValueError(f'need 3 rotor positions, got {len(positions)}')
        for rot, pos in zip(self.rotors, positions):
            if isinstance(pos, str):
                pos = letter_to_index(pos)
            rot.set_position(pos)

    def get_rotor_positions(self) -> list:
        return [rot.position for rot in self.rotors]

    def encrypt_char(self, letter: str) -> str:
        debug.log('keyboard', f'Keyboard Input: {letter}')
        self.step_rotors()
        debug.log('stepping', f'Rotor Position: {self.rotor_positions()}')

        result = self.plugboard.swap(letter)
        debug.log('plugboard', f'Plugboard Encryption: {result}')

        for wheel, rot in ((3, self.rotor_right), (2, self.rotor_middle), (1, self.rotor_left)):
            result = rot.encipher(result, Direction.FORWARD)
            debug.log('rotor', f'Wheel {wheel} Encryption: {result}')

        result = self.reflector.reflect(result)
        debug.log('reflector', f'Reflector Encryption: {result}')

        for wheel, rot in ((1, self.rotor_left), (2, self.rotor_middle), (3, self.rotor_right)):
            result = rot.encipher(result, Direction.BACKWARD)
            debug.log('rotor', f'Wheel {wheel} Encryption: {result}')

        result = self.plugboard.swap(result)
        debug.log('plugboard', f'Plugboard Encryption: {result}')

        debug.log('lampboard', f'Output (Lampboard): {result}')
        return result

    def encrypt_string(self, text: str) -> str:
        """
        encrypt character by character.
        characters outside A-Z come out as SENTINEL, the rotors still step for them.
        """
        output = []
        for char in text:
            try:
                output.append(self.encrypt_char(char))
            except InvalidCharacter as err:
                debug.log('keyboard', str(err))
                output.append(SENTINEL)
        return ''.join(output)

    def __repr__(self):
        names = '-'.join(rot.wiring.name for rot in self.rotors)
        return f'<EnigmaMachine {names} {self.reflector.name} pos={self.rotor_positions()}>'
