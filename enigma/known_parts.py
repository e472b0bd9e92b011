import enum

import numpy as np

from enigma import ALPHABET, N_LETTERS, PlugBoard, Reflector, WiringTable


class KnownRotor(enum.Enum):
    # wiring, notch positions
    I = ('EKMFLGDQVZNTOWYHXUSPAIBRCJ', (16,))
    II = ('AJDKSIRUXBLHWTMCQGZNPYFVOE', (4,))
    III = ('BDFHJLCPRTXVZNYEIWGAKMUSQO', (21,))
    IV = ('ESOVPZJAYQUIRHXLNFTGKDCMWB', (9,))
    V = ('VZBRGITYUPSDNHLXAWMJQOFECK', (25,))
    VI = ('JPGVOUMFYQBENHZRDKASXLICTW', (12, 25))
    VII = ('NZJHGRCXMYSWBOUFAIVLPEKQDT', (12, 25))
    VIII = ('FKQHTLXOCBJSPDZRAMEWNIUYGV', (12, 25))
    IDENTITY = ('ABCDEFGHIJKLMNOPQRSTUVWXYZ', (0,))

    @property
    def wiring(self) -> str:
        return self.value[0]

    @property
    def notches(self) -> tuple:
        return self.value[1]


class KnownReflector(enum.Enum):
    B = 'YRUHQSLDPXNGOKMIEBFZCWVJAT'
    C = 'FVPJIAOYEDRZXWGCTKUQSBNMHL'


def _lookup(enum_type, known):
    if isinstance(known, enum_type):
        return known
    try:
        return enum_type[str(known).strip().upper()]
    except KeyError:
        names = ', '.join(member.name for member in enum_type)
        raise ValueError(f'unknown {enum_type.__name__} {known!r}, expected one of {names}') from None


def physical_rotor(known) -> WiringTable:
    known = _lookup(KnownRotor, known)
    name = 'Identity' if known is KnownRotor.IDENTITY else known.name
    return WiringTable(name, known.wiring, known.notches)


def build_reflector(known) -> Reflector:
    known = _lookup(KnownReflector, known)
    return Reflector(known.name, known.value)


def random_wiring_table(seed: int, n_notches: int = 1) -> WiringTable:
    rng = np.random.default_rng(seed)
    forward = rng.permutation(N_LETTERS).tolist()
    notches = sorted(rng.choice(N_LETTERS, size=n_notches, replace=False).tolist())
    return WiringTable(f'random-{seed}', forward, notches)


def _random_pairs(n_pairs: int, rng: np.random.Generator) -> list:
    # first 2 * n_pairs letters of a shuffled alphabet, taken two at a time
    letters = rng.permutation(list(ALPHABET))[:2 * n_pairs].tolist()
    return list(zip(letters[::2], letters[1::2]))


def random_reflector(seed: int) -> Reflector:
    rng = np.random.default_rng(seed)
    wiring = N_LETTERS * ['']
    for first, second in _random_pairs(N_LETTERS // 2, rng):
        wiring[ALPHABET.index(first)] = second
        wiring[ALPHABET.index(second)] = first
    return Reflector(f'random-{seed}', ''.join(wiring))


def random_plugboard(n_pairs: int, seed: int) -> PlugBoard:
    if not 0 <= n_pairs <= N_LETTERS // 2:
        raise ValueError(f'n_pairs must lie in 0-{N_LETTERS // 2}, got {n_pairs}')
    rng = np.random.default_rng(seed)
    return PlugBoard(_random_pairs(n_pairs, rng))
