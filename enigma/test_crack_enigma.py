import math
import os
import string
import tempfile

import unittest as ut

import crack_enigma
import enigma
import known_parts
import language_stats
from known_parts import KnownRotor

MESSAGE = (
    "The Enigma machine is a cipher device developed and used in the early- to mid-20th century to protect"
    " commercial, diplomatic, and military communication. It was employed extensively by Nazi Germany during "
    "World War II, in all branches of the German military. The Germans believed, erroneously, that use of the"
    " Enigma machine enabled them to communicate securely and thus enjoy a huge advantage in World War II. "
    "The Enigma machine was considered to be so secure that even the most top-secret messages were enciphered"
    " on its electrical circuits. Enigma has an electromechanical rotor mechanism that scrambles the 26 letters "
    "of the alphabet. In typical use, one person enters text on the Enigma's keyboard and another person writes"
    " down which of 26 lights above the keyboard lights up at each key press. If plain text is entered, the "
    "lit-up letters are the encoded ciphertext. Entering ciphertext transforms it back into readable plaintext. "
    "The rotor mechanism changes the electrical connections between the keys and the lights with each keypress. "
    "The security of the system depends on a set of machine settings that were generally changed daily during the "
    "war, based on secret key lists distributed in advance, and on other settings that were changed for "
    "each message. The receiving station has to know and use the exact settings employed by the transmitting "
    "station to successfully decrypt a message."
)


def string_compare(s1: str, s2: str) -> float:
    n_same = 0
    for c1, c2 in zip(s1, s2):
        if c1 == c2:
            n_same += 1
    return n_same / len(s1)


class UtilsTest(ut.TestCase):
    def test_multiindexiterator(self):
        it = iter(crack_enigma.MultiindexIterator(2, 3))
        shouldbe = [
            [0, 0],
            [0, 1],
            [0, 2],
            [1, 0],
            [1, 1],
            [1, 2],
            [2, 0],
            [2, 1],
            [2, 2],
        ]
        self.assertEqual(len(crack_enigma.MultiindexIterator(2, 3)), 9)
        for i, s in zip(it, shouldbe):
            self.assertListEqual(i, s)

    def test_multiindexiterator_rotor_grid(self):
        grid = list(crack_enigma.MultiindexIterator(3, 26))
        self.assertEqual(len(grid), 26 ** 3)
        self.assertListEqual(grid[0], [0, 0, 0])
        self.assertListEqual(grid[27], [0, 1, 1])
        self.assertListEqual(grid[-1], [25, 25, 25])

    def test_string_compare(self):
        a = "abcdff"
        b = "abefff"
        self.assertAlmostEqual(string_compare(a, b), 2.0 / 3.0)


class LanguageStatsTest(ut.TestCase):
    def test_count_groups(self):
        stats = language_stats.count_groups('ab cde!')
        self.assertEqual(stats['charset'], string.ascii_uppercase)
        self.assertSetEqual(set(stats['quads']), {'ABCD', 'BCDE'})
        self.assertSetEqual(set(stats['triads']), {'ABC', 'BCD'})
        self.assertSetEqual(set(stats['diads']), {'AB', 'BC'})
        self.assertAlmostEqual(stats['quads']['ABCD'], math.log10(0.5))

    def test_count_groups_too_short(self):
        with self.assertRaises(ValueError):
            language_stats.count_groups('abc')

    def test_save_load(self):
        stats = language_stats.count_groups(MESSAGE)
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, 'language_stats.dill')
            language_stats.save_language_stats(stats, path)
            loaded = language_stats.load_language_stats(path)
        self.assertDictEqual(loaded, stats)

    def test_count_groups_in_files(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, 'sample.txt')
            with open(path, 'w', encoding='utf-8') as file_:
                file_.write(MESSAGE)
            stats = language_stats.count_groups_in_files([path])
        self.assertDictEqual(stats, language_stats.count_groups(MESSAGE))


class ScorerTest(ut.TestCase):
    def test_group_likelihood(self):
        scorer = crack_enigma.GroupLikelihoodScorer({'AB': -1.0, 'BC': -2.0}, not_known_penalty_factor=3)
        self.assertEqual(scorer.n_chars_group, 2)
        self.assertAlmostEqual(scorer.score_text('ABC'), -1.5)
        # unknown groups get three times the least likely score
        self.assertAlmostEqual(scorer.score_text('ZZ'), -6.0)
        with self.assertRaises(ValueError):
            scorer.score_text('A')

    def test_english_beats_ciphertext(self):
        plaintext = language_stats.prepare_text(MESSAGE)[:200]
        scorer = crack_enigma.GroupLikelihoodScorer(language_stats.count_groups(MESSAGE)['triads'])
        machine = known_parts_machine()
        self.assertGreater(scorer.score_text(plaintext), scorer.score_text(machine.encrypt_string(plaintext)))


def known_parts_machine(plugs=None):
    rotors = [enigma.Rotor(known_parts.physical_rotor(known)) for known in (KnownRotor.I, KnownRotor.II, KnownRotor.III)]
    return enigma.EnigmaMachine(*rotors, known_parts.build_reflector('B'), enigma.PlugBoard(plugs))


class CrackEnigmaSuccessiveBestTest(ut.TestCase):
    rotor_positions = [3, 4, 7]

    def setup_enigma_and_msg(self, len_msg, plugs=None):
        self.message = language_stats.prepare_text(MESSAGE)[:len_msg]
        encoder = known_parts_machine(plugs)
        encoder.set_rotor_positions(self.rotor_positions)
        self.encrypted_message = encoder.encrypt_string(self.message)

        self.wirings = [rot.wiring for rot in encoder.rotors]
        self.reflector = encoder.reflector
        self.scorer = crack_enigma.GroupLikelihoodScorer(language_stats.count_groups(MESSAGE)['quads'])

    def test_find_positions(self):
        self.setup_enigma_and_msg(120)
        candidates = [[3, 4, right] for right in range(26)] + [[left, 4, 7] for left in range(26)]

        decrypted_msg, decoded_pos, decoder_plugboard = crack_enigma.decode_message_successive_best(
            self.encrypted_message,
            self.wirings,
            0,
            self.reflector,
            self.scorer,
            candidate_positions=candidates,
            disable_tqdm=True,
        )
        self.assertListEqual(decoded_pos, self.rotor_positions)
        self.assertListEqual(decoder_plugboard.pairs, [])
        self.assertEqual(decrypted_msg, self.message)

    def test_find_plug(self):
        self.setup_enigma_and_msg(120, plugs=[('T', 'E')])

        decrypted_msg, decoded_pos, decoder_plugboard = crack_enigma.decode_message_successive_best(
            self.encrypted_message,
            self.wirings,
            1,
            self.reflector,
            self.scorer,
            candidate_positions=[self.rotor_positions],
            disable_tqdm=True,
        )
        self.assertListEqual(decoded_pos, self.rotor_positions)
        self.assertListEqual(decoder_plugboard.pairs, [('E', 'T')])
        self.assertEqual(decrypted_msg, self.message)
        self.assertEqual(string_compare(decrypted_msg, self.message), 1.0)

    def test_plug_count_out_of_range(self):
        self.setup_enigma_and_msg(40)
        for n_plugs in (14, -1):
            with self.assertRaises(ValueError):
                crack_enigma.decode_message_successive_best(
                    self.encrypted_message,
                    self.wirings,
                    n_plugs,
                    self.reflector,
                    self.scorer,
                    candidate_positions=[self.rotor_positions],
                    disable_tqdm=True,
                )


if __name__ == "__main__":
    ut.main()
