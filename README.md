# corevm

A Core War arena. It loads two to four compiled champions (`.cor` files) into
a shared circular memory of 6144 bytes. It then runs their processes cycle by
cycle.

Every 1536 cycles the machine checks which players have reported `live` in
that period. The period gets 5 cycles shorter each time 40 `live` calls have
been counted. The game ends when at most one player has reported `live` in a
period. The winner is the player named by the most recent `live`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```
corevm [-dump nbr_cycle] [[-n prog_number] [-a load_address] prog_name] ...
```

- `-dump nbr_cycle` stops the game once more than `nbr_cycle` cycles have
  run. When this option is given, the memory is printed at the end of the run
  as upper-case hexadecimal, 32 bytes per line.
- `-n prog_number` sets the number of the next program. That number is placed
  in its first register and is the number that `live` must name. Programs
  without `-n` get the numbers 1, 2, … in argument order.
- `-a load_address` sets where the next program is loaded. The address must be
  lower than 6144. If a program would run past the end of memory, the extra
  bytes are dropped. Programs without `-a` are spread evenly across memory.

You need at least two champions and can have at most four. `corevm -h` prints
the help text. The command exits with status 84 in these cases:

- the arguments are invalid,
- a champion file cannot be read,
- a champion file is truncated,
- a champion file has the wrong magic number.

While the game runs, each `live` instruction prints a line like this:

```
The player 1(zork) is alive.
```

The `aff` instruction writes one character. At the end the winner is
announced:

```
The player 1(zork) has won.
```

## Champion files

A champion file starts with a 2192-byte header. The header holds these fields,
with the integers in big-endian order:

| Field | Size |
| --- | --- |
| magic number | 4 bytes, must be `0xea83f3` |
| program name | 129 bytes, NUL-padded |
| padding | 3 bytes |
| program size | 4 bytes |
| comment | 2049 bytes, NUL-padded |
| padding | 3 bytes |

The program body follows the header.

## Library use

You can also run the machine from Python:

```python
import sys
from corevm.flags import parse_arguments
from corevm.loader import load_champions
from corevm.vm import VirtualMachine

dump, champions = parse_arguments(["zork.cor", "bee.cor"])
vm = VirtualMachine(champions, dump, sys.stdout)
load_champions(champions, vm.memory)
winner = vm.run()
```

`VirtualMachine.run()` returns the winning `Champion`, or `None` if no player
ever reported `live`. You can also drive the game yourself with
`VirtualMachine.step()` and `VirtualMachine.check_end()`.

The modules are:

- `corevm.op`: the instruction table (`OP_TAB`, `op_by_code`), the `ArgType`
  flags and the machine's limits.
- `corevm.memory`: the memory helpers.
  - `new_memory`, `read_int`, `write_int` and `load_program` work on the arena.
  - `decode_coding_byte`, `check_coding_byte`, `arg_size` and
    `index_arg_size` handle coding bytes.
  - `format_dump` formats the memory dump.
- `corevm.champion`: `Header`, `Flags` and `Champion`. A champion keeps the
  processes it forks as children.
- `corevm.instructions`: the sixteen instruction handlers, `op_live` to
  `op_aff`, keyed by opcode in `INSTRUCTIONS`.
- `corevm.loader`: `read_header`, `load_champion`, `load_champions`,
  `check_unique_ids` and `LoadError`.
- `corevm.flags`: `parse_arguments`, `parse_number`, `check_champions` and
  `ArgumentError`.
- `corevm.vm`: `VirtualMachine`, which runs the game loop.
- `corevm.cli`: the `corevm` command.

## What it does not do

corevm only runs champions that are already compiled. It has no assembler to
turn champion source into `.cor` files, and no graphical view of the arena.