"""Command-line entry point."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .flags import ArgumentError, parse_arguments
from .loader import LoadError, load_champions
from .vm import VirtualMachine

EXIT_FAILURE = 84


def usage() -> str:
    """Return the help text."""
    return (
        "USAGE\n"
        "corevm [-dump nbr_cycle] [[-n prog_number] [-a load_address] prog_name] ...\n"
        "DESCRIPTION\n"
        "-dump nbr_cycle dumps the memory after the nbr_cycle execution (if the round isn't\n"
        "already over) with the following format: 32 bytes/line in hexadecimal "
        "(A0BCDEFE1DD3...)\n"
        "-n prog_number sets the next program's number. By default, the first free "
        "number in the\n"
        "parameter order\n"
        "-a load_adress sets the next program's loading address. When no address is "
        "specifided,\n"
        "optimize the adresses so that the processes are as far away from each other as\n"
        "possible. The addresses are MEM_SIZE modulo.\n"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run a game from command-line arguments; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) == 1:
        if args[0] == "-h":
            sys.stdout.write(usage())
            return 0
        return EXIT_FAILURE
    try:
        dump, champions = parse_arguments(args)
        vm = VirtualMachine(champions, dump, sys.stdout)
        load_champions(vm.champions, vm.memory)
    except (ArgumentError, LoadError):
        return EXIT_FAILURE
    vm.run()
    return 0