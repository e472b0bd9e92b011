import argparse
import logging
import sys

import crack_enigma
import enigma
import enigma_settings
import language_stats
from enigma_debug import COMPONENTS, Debug


def _add_machine_args(parser: argparse.ArgumentParser, with_positions=True):
    parser.add_argument('--config', help='JSON file with the machine settings')
    parser.add_argument('--rotors', nargs=3, metavar='ROTOR',
                        help='rotor names left to right, e.g. I II III')
    parser.add_argument('--reflector', help='reflector name (B or C)')
    parser.add_argument('--rings', help='ring settings as letters, e.g. AAA')
    if with_positions:
        parser.add_argument('--positions', help='start positions as letters, e.g. AAA')
        parser.add_argument('--plugs', nargs='*', metavar='PAIR', help='plug board pairs, e.g. AC FG')


def _settings_from_args(args) -> enigma_settings.MachineSettings:
    cfg = enigma_settings.load_settings(args.config).to_dict() if args.config else {}
    for key, value in (('rotors', args.rotors),
                       ('reflector', args.reflector),
                       ('ring_settings', args.rings),
                       ('positions', getattr(args, 'positions', None)),
                       ('plugboard', getattr(args, 'plugs', None))):
        if value is not None:
            cfg[key] = value
    return enigma_settings.settings_from_dict(cfg)


def _read_text(text):
    if text is None:
        text = sys.stdin.read()
    return text.strip()


def cmd_encrypt(args) -> int:
    machine = enigma_settings.build_machine(_settings_from_args(args))
    text = _read_text(args.text)
    if args.strip:
        text = language_stats.prepare_text(text, enigma.ALPHABET)
    print(machine.encrypt_string(text))
    return 0


def cmd_stats(args) -> int:
    stats = language_stats.count_groups_in_files(args.files, disable_tqdm=False)
    language_stats.save_language_stats(stats, args.output)
    print(f"wrote {len(stats['quads'])} quads to {args.output}")
    return 0


def cmd_crack(args) -> int:
    machine_settings = _settings_from_args(args)
    machine = enigma_settings.build_machine(machine_settings)
    wirings = [rot.wiring for rot in machine.rotors]

    if not 0 <= args.n_plugs <= enigma.N_LETTERS // 2:
        raise enigma_settings.SettingsError(f'--n-plugs must lie in 0-{enigma.N_LETTERS // 2}, got {args.n_plugs}')
    try:
        stats = language_stats.load_language_stats(args.stats)
    except OSError as err:
        raise enigma_settings.SettingsError(f'cannot read language statistics: {err}') from err
    if not isinstance(stats, dict) or args.group not in stats:
        raise enigma_settings.SettingsError(f'{args.stats} has no {args.group} statistics')
    scorer = crack_enigma.GroupLikelihoodScorer(stats[args.group])

    ciphertext = language_stats.prepare_text(_read_text(args.ciphertext), enigma.ALPHABET)
    if len(ciphertext) < scorer.n_chars_group:
        raise enigma_settings.SettingsError(
            f'ciphertext needs at least {scorer.n_chars_group} letters to be scored, got {len(ciphertext)}')

    decoded, positions, plugboard = crack_enigma.decode_message_successive_best(
        ciphertext,
        wirings,
        args.n_plugs,
        machine.reflector,
        scorer,
        ring_settings=machine_settings.ring_settings,
        disable_tqdm=args.quiet,
    )
    print('positions:', ''.join(enigma.index_to_letter(p) for p in positions))
    print('plugboard:', ' '.join(a + b for a, b in plugboard.pairs))
    print(decoded)
    return 0


def make_parser() -> argparse.ArgumentParser:
    # logging options, shared by every subcommand
    logging_args = argparse.ArgumentParser(add_help=False)
    logging_args.add_argument('--debug', action='append', choices=COMPONENTS, metavar='COMPONENT',
                              help=f"log the steps of this component, repeat for more ({', '.join(COMPONENTS)})")
    logging_args.add_argument('--log-file', help='also write the debug log to this file')

    parser = argparse.ArgumentParser(prog='enigma-machine', description='3 rotor Enigma machine simulator')
    sub = parser.add_subparsers(dest='command', required=True)

    enc = sub.add_parser('encrypt', parents=[logging_args], help='encrypt or decrypt text')
    enc.add_argument('text', nargs='?', help='text to encrypt, read from stdin if omitted')
    enc.add_argument('--strip', action='store_true', help='upper-case and drop everything but A-Z first')
    _add_machine_args(enc)
    enc.set_defaults(func=cmd_encrypt)

    st = sub.add_parser('stats', parents=[logging_args], help='build n-gram statistics from sample texts')
    st.add_argument('output', help='dill file to write')
    st.add_argument('files', nargs='+', help='text files to read')
    st.set_defaults(func=cmd_stats)

    cr = sub.add_parser('crack', parents=[logging_args],
                        help='search start positions and plugs of a known rotor setup')
    cr.add_argument('ciphertext', nargs='?', help='ciphertext, read from stdin if omitted')
    cr.add_argument('--stats', required=True, help='dill file written by the stats command')
    cr.add_argument('--group', choices=sorted(language_stats.GROUP_SIZES), default='quads')
    cr.add_argument('--n-plugs', type=int, default=0)
    cr.add_argument('--quiet', action='store_true', help='no progress bars')
    _add_machine_args(cr, with_positions=False)
    cr.set_defaults(func=cmd_crack)
    return parser


def main(argv=None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)

    if args.debug:
        Debug.setup(level=logging.DEBUG, log_to=args.log_file)
        for dbg in (enigma.debug, crack_enigma.debug):
            dbg.enable(*args.debug)

    try:
        return args.func(args)
    except enigma_settings.SettingsError as err:
        print(f'{parser.prog}: error: {err}', file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
