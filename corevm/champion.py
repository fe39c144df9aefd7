"""Champions and the processes they fork."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field

from .op import REG_NUMBER


@dataclass
class Header:
    """Header of a compiled champion."""

    magic: int = 0
    prog_name: str = ""
    prog_size: int = 0
    comment: str = ""


@dataclass
class Flags:
    """Command-line settings for one champion; -1 means not given."""

    prog_name: str | None = None
    n: int = -1
    a: int = -1


@dataclass
class Champion:
    """A running process; the top-level one stands for a player."""

    id: int = 0
    cycle_instruction: int = 0
    live: int = 0
    last_live: bool = False
    pc: int = 0
    carry: int = 1
    header: Header | None = None
    flags: Flags = field(default_factory=Flags)
    registers: list[int] = field(default_factory=lambda: [0] * REG_NUMBER)
    children: list[Champion] = field(default_factory=list)

    def fork(self, pc: int, cycle_instruction: int) -> Champion:
        """Create a child process at `pc` sharing this one's state and append it."""
        child = Champion(
            id=self.id,
            cycle_instruction=cycle_instruction,
            pc=pc,
            carry=self.carry,
            header=dataclasses.replace(self.header) if self.header else None,
            flags=dataclasses.replace(self.flags),
            registers=list(self.registers),
        )
        self.children.append(child)
        return child

    def processes(self) -> Iterator[Champion]:
        """Yield this process, then its descendants depth first.

        Children appended while iterating are visited too.
        """
        yield self
        for child in self.children:
            yield from child.processes()

    def kill_children(self) -> None:
        """Drop every process forked from this one."""
        self.children.clear()

    def reset_registers(self) -> None:
        """Set the start state from the flags: pc at the load address, r1 the number."""
        self.pc = self.flags.a
        self.registers = [0] * REG_NUMBER
        self.registers[0] = self.flags.n