"""The arena: scheduling of processes and the end-of-game rules."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from .champion import Champion
from .instructions import INSTRUCTIONS
from .memory import format_dump, new_memory
from .op import CYCLE_DELTA, CYCLE_TO_DIE, NBR_LIVE


class VirtualMachine:
    """Shared memory and the champions fighting in it."""

    def __init__(
        self,
        champions: Iterable[Champion],
        dump: int = -1,
        out: TextIO | None = None,
    ) -> None:
        self.dump = dump
        self.max_ctd = CYCLE_TO_DIE
        self.actual_ctd = 0
        self.total_cycle = 0
        self.nb_live = 0
        self.champions = list(champions)
        self.memory = new_memory()
        self.out = out if out is not None else sys.stdout

    def execute(self, process: Champion) -> None:
        """Run one cycle of a process: wait, or execute the instruction at its pc."""
        if process.cycle_instruction > 0:
            process.cycle_instruction -= 1
            return
        handler = INSTRUCTIONS.get(self.memory[process.pc])
        # An unknown opcode leaves the process where it is.
        if handler is not None:
            handler(self, process)

    def step(self) -> None:
        """Give every process one cycle, players in order, each followed by its forks."""
        for champion in self.champions:
            for process in champion.processes():
                if self.champions[0].live != -1:
                    self.execute(process)

    def _prune(self, processes: Iterable[Champion]) -> None:
        for process in processes:
            if process.live <= 0:
                process.kill_children()
            if process.children:
                self._prune(process.children)

    def _alive_count_check(self) -> bool:
        alive = 0
        for champion in self.champions:
            if champion.live > 0:
                alive += 1
                champion.live = 0
            else:
                champion.live = -1
        return alive <= 1

    def check_end(self) -> bool:
        """Advance the cycle counters and tell whether the game is over."""
        self.total_cycle += 1
        self.actual_ctd += 1
        if self.dump != -1 and self.total_cycle > self.dump:
            return True
        if self.nb_live >= NBR_LIVE:
            self.nb_live %= NBR_LIVE
            self.max_ctd -= CYCLE_DELTA
        if self.actual_ctd >= self.max_ctd:
            self.actual_ctd %= abs(self.max_ctd)
            self._prune(self.champions)
            return self._alive_count_check()
        return False

    def winner(self) -> Champion | None:
        """The first player named by the most recent live, if any."""
        return next((c for c in self.champions if c.last_live), None)

    def run(self) -> Champion | None:
        """Play until the game ends, report the winner and dump memory if asked."""
        while True:
            self.step()
            if self.check_end():
                break
        winner = self.winner()
        if winner is not None:
            name = winner.header.prog_name if winner.header else ""
            self.out.write(f"The player {winner.registers[0]}({name}) has won.\n")
        if self.dump != -1:
            self.out.write(format_dump(self.memory))
        return winner