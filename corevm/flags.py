"""Command-line parsing of the dump cycle and the champions' settings."""

from __future__ import annotations

from collections.abc import Sequence

from .champion import Champion
from .op import MEM_SIZE

MAX_CHAMPIONS = 4


class ArgumentError(Exception):
    """The command line is not valid."""


def parse_number(text: str) -> int:
    """Parse a non-negative decimal number made only of ASCII digits."""
    if any(char not in "0123456789" for char in text):
        raise ArgumentError(f"not a number: {text!r}")
    return int(text) if text else 0


def _option_value(args: Sequence[str], pos: int) -> int:
    if pos + 1 >= len(args):
        raise ArgumentError(f"{args[pos]} needs a value")
    return parse_number(args[pos + 1])


def assign_numbers(champions: Sequence[Champion]) -> None:
    """Give champions without -n the next numbers counting from 1."""
    number = 1
    for champion in champions:
        if champion.flags.n == -1:
            champion.flags.n = number
            number += 1


def assign_addresses(champions: Sequence[Champion]) -> None:
    """Spread champions without -a evenly through the arena."""
    step = MEM_SIZE // len(champions)
    address = 0
    for champion in champions:
        if champion.flags.a == -1:
            champion.flags.a = address
            address += step


def check_champions(champions: Sequence[Champion]) -> None:
    """Number the champions, validate them and set their start state."""
    for index, champion in enumerate(champions, start=1):
        champion.id = index
    if len(champions) < 2:
        raise ArgumentError("at least two champions are needed")
    for champion in champions:
        if champion.flags.prog_name is None:
            raise ArgumentError("a champion has no file")
        if champion.flags.a >= MEM_SIZE:
            raise ArgumentError(f"load address {champion.flags.a} is out of memory")
    assign_numbers(champions)
    assign_addresses(champions)
    for champion in champions:
        champion.reset_registers()


def parse_arguments(argv: Sequence[str]) -> tuple[int, list[Champion]]:
    """Parse the arguments after the program name; return the dump cycle and champions.

    The dump cycle is -1 when not given.
    """
    args = list(argv)
    dump = -1
    champions: list[Champion] = []
    pos = 0
    for _ in range(MAX_CHAMPIONS):
        if pos >= len(args):
            break
        champion = Champion()
        while pos < len(args):
            arg = args[pos]
            if arg == "-dump":
                if dump != -1:
                    raise ArgumentError("-dump given twice")
                dump = _option_value(args, pos)
                pos += 2
            elif arg == "-n":
                if champion.flags.n != -1:
                    raise ArgumentError("-n given twice for one champion")
                champion.flags.n = _option_value(args, pos)
                pos += 2
            elif arg == "-a":
                if champion.flags.a != -1:
                    raise ArgumentError("-a given twice for one champion")
                champion.flags.a = _option_value(args, pos)
                pos += 2
            else:
                champion.flags.prog_name = arg
                pos += 1
                break
        champions.append(champion)
    if pos < len(args):
        raise ArgumentError("too many arguments")
    check_champions(champions)
    return dump, champions