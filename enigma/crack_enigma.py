import collections

import baseconvert
import numpy as np
import tqdm

from enigma_debug import Debug
from enigma import ALPHABET, N_LETTERS, EnigmaMachine, PlugBoard, Reflector, Rotor

debug = Debug()


class MultiindexIterator:
    """
    iterate over a grid of points in a linear way.
    e.g. for n_dims == 2 and n_val_per_dim = 3 it is
    [0,0]
    [0,1]
    [0,2]
    [1,0]
    [1,1]
    [1,2]
    ....
    [2,2]
    """
    def __init__(self, n_dims, n_val_per_dim):
        self.n_dims = n_dims
        self.n_val_per_dim = n_val_per_dim
        self.lin_idx = 0

        self.len = self.n_val_per_dim ** self.n_dims

    def __len__(self):
        return self.len

    def __iter__(self):
        self.lin_idx = 0
        return self

    def __next__(self):
        if self.lin_idx < self.len:
            baseconverted = list(baseconvert.base(self.lin_idx, 10, self.n_val_per_dim))
            n_pad_zeros = self.n_dims - len(baseconverted)
            self.lin_idx += 1
            return n_pad_zeros * [0] + baseconverted
        else:
            raise StopIteration


class TextScorerBase:
    def score_text(self, text: str) -> float:
        raise NotImplementedError


class GroupLikelihoodScorer(TextScorerBase):
    def __init__(self, loglikelihooddict: dict, not_known_penalty_factor=2):
        """
        :param loglikelihooddict: log likelihood of each letter group, all groups of the same length
        :param not_known_penalty_factor: If a group is encountered that is not in the loglikelihooddict,
        choose a penalty based on the least likely group and the additional penalty factor
        """
        if not loglikelihooddict:
            raise ValueError('need at least one group to score with')
        least_likely = min(loglikelihooddict, key=lambda k: loglikelihooddict[k])
        self.lld = collections.defaultdict(lambda: loglikelihooddict[least_likely] * not_known_penalty_factor,
                                           loglikelihooddict)
        self.n_chars_group = len(least_likely)

    def score_text(self, text: str) -> float:
        n_groups = len(text) - self.n_chars_group + 1
        if n_groups < 1:
            raise ValueError(f'text must have at least {self.n_chars_group} characters to be scored')
        score = 0.
        for i in range(n_groups):
            group = text[i:i + self.n_chars_group]
            score += self.lld[group]
        score /= n_groups
        return score


def decode_message_successive_best(encrypted_message: str, wirings: list, n_plugs: int, reflector: Reflector,
                                   scorer: TextScorerBase, ring_settings=(0, 0, 0), candidate_positions=None,
                                   disable_tqdm=False):
    """
    find the start positions and plug board that turn the message into the best scoring text.
    the machine (rotor order, ring settings, reflector) is assumed known.
    first all start positions are scored without plugs, then the best plug is added one at a time.

    :return: decoded message, start positions (left to right), plug board
    """
    if not 0 <= n_plugs <= N_LETTERS // 2:
        raise ValueError(f'n_plugs must lie in 0-{N_LETTERS // 2}, got {n_plugs}')
    decoder_plugboard = PlugBoard()
    rotors = [Rotor(wiring, ring) for wiring, ring in zip(wirings, ring_settings)]
    decoder_enigma = EnigmaMachine(*rotors, reflector, decoder_plugboard)

    if candidate_positions is None:
        candidate_positions = MultiindexIterator(len(rotors), N_LETTERS)

    # go through all positions and get the score of the output text
    highscore = -np.inf
    best_pos = decoder_enigma.get_rotor_positions()
    for pos in tqdm.tqdm(candidate_positions, disable=disable_tqdm):
        decoder_enigma.set_rotor_positions(pos)
        decoder_try = decoder_enigma.encrypt_string(encrypted_message)
        score = scorer.score_text(decoder_try)
        if score > highscore:
            highscore = score
            best_pos = list(pos)
    debug.log('search', f'best start position {best_pos} with score {highscore:.3f}')

    available_letters = list(ALPHABET)
    for _ in tqdm.tqdm(range(n_plugs), disable=disable_tqdm):
        highscore = -np.inf
        best_swap = (available_letters[0], available_letters[1])
        # go through all remaining letter pairs and get their score
        for i, first in enumerate(available_letters):
            for second in available_letters[i + 1:]:
                decoder_plugboard.add_pair(first, second)
                decoder_enigma.set_rotor_positions(best_pos)
                decoder_try = decoder_enigma.encrypt_string(encrypted_message)
                score = scorer.score_text(decoder_try)
                if score > highscore:
                    highscore = score
                    best_swap = (first, second)
                decoder_plugboard.remove_pair(first, second)

        # use the best swap for further decrypting
        decoder_plugboard.add_pair(*best_swap)
        available_letters.remove(best_swap[0])
        available_letters.remove(best_swap[1])
        debug.log('search', f'plug {best_swap[0]}{best_swap[1]} with score {highscore:.3f}')

    decoder_enigma.set_rotor_positions(best_pos)
    decoded_msg = decoder_enigma.encrypt_string(encrypted_message)

    return decoded_msg, best_pos, decoder_plugboard
