from __future__ import annotations

import argparse
import logging
import os
import sys

from typing import List, Mapping, Optional

from .errors import BFTError, format_diagnostic
from .lexer import tokenize
from .state import CELL_DTYPES, TapeConfig
from .vm import Machine

EXIT_OK = 0
EXIT_PROGRAM_ERROR = 1
EXIT_USAGE = 2
EXIT_NO_SOURCE = 3

_TRUTHY = {'1', 'true', 'yes', 'on'}


def init_logging(verbose: bool = False) -> None:
    root = logging.getLogger('bft')
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)5s %(name)s: %(message)s'))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not an integer: {text!r}') from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f'must be a positive integer, got {value}')
    return value


def build_parser(env: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    env = os.environ if env is None else env

    cell_bits = int(env.get('BFT_CELL_BITS') or 8)
    if cell_bits not in CELL_DTYPES:
        raise ValueError(f'BFT_CELL_BITS must be one of {sorted(CELL_DTYPES)}, got {cell_bits}')

    parser = argparse.ArgumentParser(prog='bft', description='A Brainf*ck interpreter.')
    parser.add_argument('program', help='The Brainf*ck program to run')
    parser.add_argument(
        '-c', '--cells', type=_positive_int,
        default=_positive_int(env['BFT_CELLS']) if env.get('BFT_CELLS') else None,
        help='Number of cells for the program tape (default 30000)',
    )
    parser.add_argument(
        '-e', '--extensible', action='store_true',
        default=env.get('BFT_EXTENSIBLE', '').lower() in _TRUTHY,
        help='Allow the program tape to be automatically extended',
    )
    parser.add_argument(
        '--cell-bits', type=int, choices=sorted(CELL_DTYPES),
        default=cell_bits,
        help='Width of each tape cell in bits (default 8)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug information to stderr')
    parser.add_argument('--context', action='store_true', help='Show source context for errors')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        parser = build_parser()
    except (argparse.ArgumentTypeError, ValueError) as e:
        print(f"bft: error: bad BFT_* environment default: {e}", file=sys.stderr)
        return EXIT_USAGE
    args = parser.parse_args(argv)
    init_logging(args.verbose)

    try:
        with open(args.program, 'rb') as f:
            data = f.read()
    except OSError as e:
        print(f"bft: cannot read {args.program}: {e.strerror or e}", file=sys.stderr)
        return EXIT_NO_SOURCE

    config = TapeConfig(capacity=args.cells, growable=args.extensible, cell_bits=args.cell_bits)
    try:
        program = tokenize(args.program, data)
        program.validate()
        Machine(config).run(program)
    except BFTError as e:
        print(format_diagnostic(e, data) if args.context else str(e), file=sys.stderr)
        return EXIT_PROGRAM_ERROR

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
