"""Reading compiled champions from disk into the arena."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import BinaryIO

from .champion import Champion, Header
from .memory import load_program
from .op import COREWAR_EXEC_MAGIC

# magic, name (+NUL), padding, program size, comment (+NUL), padding
_HEADER = struct.Struct(">i129s3xi2049s3x")
HEADER_SIZE = _HEADER.size


class LoadError(Exception):
    """A champion file could not be read or is not a valid champion."""


def _text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def read_header(stream: BinaryIO) -> Header:
    """Read and decode a champion header from a binary stream."""
    raw = stream.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise LoadError("champion header is truncated")
    magic, name, size, comment = _HEADER.unpack(raw)
    return Header(magic=magic, prog_name=_text(name), prog_size=size, comment=_text(comment))


def load_champion(champion: Champion, memory: bytearray) -> None:
    """Read the champion's file and copy its body to its load address."""
    path = champion.flags.prog_name
    if path is None:
        raise LoadError("champion has no file")
    try:
        with open(path, "rb") as stream:
            header = read_header(stream)
            if header.magic != COREWAR_EXEC_MAGIC:
                raise LoadError(f"{path}: bad magic number")
            body = stream.read(max(0, header.prog_size))
    except OSError as exc:
        raise LoadError(f"{path}: {exc.strerror or exc}") from exc
    champion.header = header
    load_program(memory, body, champion.flags.a)


def check_unique_ids(champions: Iterable[Champion]) -> None:
    """Raise LoadError if two champions share an id."""
    seen: set[int] = set()
    for champion in champions:
        if champion.id == -1:
            continue
        if champion.id in seen:
            raise LoadError(f"duplicate champion id {champion.id}")
        seen.add(champion.id)


def load_champions(champions: Iterable[Champion], memory: bytearray) -> None:
    """Load every champion into memory, then check their ids."""
    champions = list(champions)
    for champion in champions:
        load_champion(champion, memory)
    check_unique_ids(champions)