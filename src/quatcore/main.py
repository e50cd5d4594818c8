#!/usr/bin/env python3
"""
===============================================================================
QUATCORE - COMMAND LINE ENTRY POINT
===============================================================================
Evaluates single quaternion operations from the shell.

USAGE:
    quatcore mul 1 2 3 4 2 -1 -2 -3       # Hamilton product
    quatcore div 1 2 3 4 0 1 0 0          # a * inverse(b)
    quatcore normalize 1 2 3 4
    quatcore euler --degrees 90 0 0       # from_euler_angles
    quatcore --config config/quatcore.yaml compare tilt 1 0 0 0

Operands are either four numbers (w x y z) or the name of a quaternion
declared in the YAML config file.

DEPENDENCIES:
    numpy, pyyaml
===============================================================================
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence

import numpy as np

from quatcore.config import Settings, configure_logging, load_config
from quatcore.constants import COMPONENT_COUNT, DEG2RAD
from quatcore.errors import InvalidArgumentError
from quatcore.quaternion import Quaternion

logger = logging.getLogger('quatcore.main')

BINARY_COMMANDS = ('mul', 'div', 'add', 'sub', 'compare')
UNARY_COMMANDS = ('inverse', 'conjugate', 'normalize', 'length')


def parse_operands(tokens: Sequence[str], count: int,
                   named: Dict[str, Quaternion]) -> List[Quaternion]:
    """
    Turn command line tokens into quaternions.

    Args:
        tokens: Raw tokens; each operand is a config name or four numbers.
        count: Number of operands the command expects.
        named: Named quaternions from the config file.

    Returns:
        List of exactly ``count`` quaternions.

    Raises:
        InvalidArgumentError: If the tokens do not form ``count`` operands.
    """
    operands = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in named:
            operands.append(named[token].copy())
            i += 1
            continue

        chunk = tokens[i:i + COMPONENT_COUNT]
        values = []
        for v in chunk:
            try:
                values.append(float(v))
            except ValueError:
                raise InvalidArgumentError(
                    f"'{v}' is neither a number nor a named quaternion"
                ) from None
        operands.append(Quaternion.from_wxyz(values))
        i += COMPONENT_COUNT

    if len(operands) != count:
        raise InvalidArgumentError(
            f"Expected {count} quaternion operand(s), got {len(operands)}"
        )
    return operands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='quatcore',
        description='Quaternion algebra from the command line',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  quatcore mul 1 2 3 4 2 -1 -2 -3     Hamilton product
  quatcore inverse 1 2 3 4            Multiplicative inverse
  quatcore euler 0.1 0.2 0.3          From Euler angles (radians)
  quatcore compare 1 0 0 0 1 0 0 0    Strict and approximate equality
        """
    )

    parser.add_argument('--config', type=str, default=None,
                        help='Path to quatcore config YAML')
    parser.add_argument('--epsilon', type=float, default=None,
                        help='Tolerance for approximate comparison '
                             '(default: from config, else 1e-11)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    for name in BINARY_COMMANDS:
        cmd = sub.add_parser(name, help=f'{name} two quaternions')
        cmd.add_argument('operands', nargs='+',
                         help='Two operands: names or w x y z')

    for name in UNARY_COMMANDS:
        cmd = sub.add_parser(name, help=f'{name} of a quaternion')
        cmd.add_argument('operands', nargs='+',
                         help='One operand: name or w x y z')

    euler = sub.add_parser('euler', help='Quaternion from Euler angles')
    euler.add_argument('angles', nargs=3, type=float, metavar='ANGLE',
                       help='Rotation about X, Y and Z')
    euler.add_argument('--degrees', action='store_true',
                       help='Angles are in degrees (default: radians)')

    return parser


def _fmt(value: float) -> str:
    return str(np.float32(value))


def run(args: argparse.Namespace, settings: Settings) -> List[str]:
    """
    Execute the parsed command.

    Returns:
        Output lines to print.
    """
    command = args.command

    if command == 'euler':
        angles = np.array(args.angles, dtype=float)
        if args.degrees or settings.degrees:
            angles = angles * DEG2RAD
        logger.debug(f"Euler angles (rad): {angles}")
        return [str(Quaternion.from_euler_angles(*angles))]

    if command in BINARY_COMMANDS:
        a, b = parse_operands(args.operands, 2, settings.quaternions)
        if command == 'compare':
            epsilon = args.epsilon if args.epsilon is not None else settings.epsilon
            return [
                f"equal: {a == b}",
                f"roughly_eq: {a.roughly_eq(b, epsilon)} (epsilon={epsilon:g})",
                f"square_length(a - b): {_fmt((a - b).square_length())}",
            ]
        result = {'mul': a.mul, 'div': a.div, 'add': a.add, 'sub': a.sub}[command](b)
        return [str(result)]

    (p,) = parse_operands(args.operands, 1, settings.quaternions)
    if command == 'length':
        return [
            f"length: {_fmt(p.length())}",
            f"square_length: {_fmt(p.square_length())}",
        ]
    result = {'inverse': p.inverse, 'conjugate': p.conjugate,
              'normalize': p.normalize}[command]()
    return [str(result)]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments and prints the result
    of the requested operation.

    Returns:
        Process exit status (0 on success, 2 on invalid arguments).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_config(args.config)
        configure_logging('DEBUG' if args.verbose else settings.log_level)
        lines = run(args, settings)
    except InvalidArgumentError as exc:
        logger.error(str(exc))
        return 2

    for line in lines:
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
