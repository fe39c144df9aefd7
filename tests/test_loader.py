import io

import pytest

from corevm.champion import Champion, Flags
from corevm.loader import (
    HEADER_SIZE,
    LoadError,
    check_unique_ids,
    load_champion,
    load_champions,
    read_header,
)
from corevm.memory import new_memory
from corevm.op import COREWAR_EXEC_MAGIC

BODY = bytes([1, 0, 0, 0, 1])


def _champion_file(name=b"alpha", body=BODY, magic=b"\x00\xea\x83\xf3", comment=b"a test"):
    header = bytearray(2192)
    header[0:4] = magic
    header[4:4 + len(name)] = name
    header[136:140] = len(body).to_bytes(4, "big")
    header[140:140 + len(comment)] = comment
    return bytes(header) + body


def _write(tmp_path, filename, data):
    path = tmp_path / filename
    path.write_bytes(data)
    return str(path)


def test_header_size_is_fixed_by_format():
    stream = io.BytesIO(_champion_file())
    read_header(stream)
    assert stream.tell() == 2192
    assert HEADER_SIZE == 2192


def test_read_header_decodes_fields():
    stream = io.BytesIO(_champion_file())
    header = read_header(stream)
    assert header.magic == COREWAR_EXEC_MAGIC
    assert header.prog_name == "alpha"
    assert header.prog_size == len(BODY)
    assert header.comment == "a test"
    assert stream.tell() == HEADER_SIZE
    assert stream.read() == BODY


def test_read_header_truncated():
    with pytest.raises(LoadError):
        read_header(io.BytesIO(b"\x00\xea\x83\xf3"))


def test_load_champion_places_body(tmp_path):
    path = _write(tmp_path, "a.cor", _champion_file())
    champion = Champion(flags=Flags(prog_name=path, n=1, a=100))
    memory = new_memory()
    load_champion(champion, memory)
    assert memory[100:100 + len(BODY)] == BODY
    assert champion.header.prog_name == "alpha"
    assert sum(memory) == sum(BODY)


def test_load_champion_bad_magic(tmp_path):
    path = _write(tmp_path, "bad.cor", _champion_file(magic=b"\x00\x00\x00\x01"))
    champion = Champion(flags=Flags(prog_name=path, n=1, a=0))
    with pytest.raises(LoadError):
        load_champion(champion, new_memory())


def test_load_champion_missing_file(tmp_path):
    champion = Champion(flags=Flags(prog_name=str(tmp_path / "nope.cor"), n=1, a=0))
    with pytest.raises(LoadError):
        load_champion(champion, new_memory())


def test_load_champions_loads_all(tmp_path):
    first = _write(tmp_path, "a.cor", _champion_file(name=b"alpha"))
    second = _write(tmp_path, "b.cor", _champion_file(name=b"beta", body=b"\x10\x01"))
    champions = [
        Champion(id=1, flags=Flags(prog_name=first, n=1, a=0)),
        Champion(id=2, flags=Flags(prog_name=second, n=2, a=50)),
    ]
    memory = new_memory()
    load_champions(champions, memory)
    assert memory[0:5] == BODY
    assert memory[50:52] == b"\x10\x01"
    assert [c.header.prog_name for c in champions] == ["alpha", "beta"]


def test_check_unique_ids_rejects_duplicates():
    with pytest.raises(LoadError):
        check_unique_ids([Champion(id=1), Champion(id=2), Champion(id=1)])


def test_load_champions_rejects_duplicate_ids(tmp_path):
    path = _write(tmp_path, "a.cor", _champion_file())
    champions = [
        Champion(id=3, flags=Flags(prog_name=path, n=1, a=0)),
        Champion(id=3, flags=Flags(prog_name=path, n=2, a=10)),
    ]
    with pytest.raises(LoadError):
        load_champions(champions, new_memory())