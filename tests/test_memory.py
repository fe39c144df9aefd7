import pytest

from corevm.memory import (
    arg_size,
    check_coding_byte,
    decode_coding_byte,
    format_dump,
    index_arg_size,
    load_program,
    new_memory,
    read_int,
    write_int,
)
from corevm.op import DIR_SIZE, IND_SIZE, MEM_SIZE, ArgType, op_by_code


def test_new_memory_is_zeroed():
    memory = new_memory()
    assert len(memory) == MEM_SIZE
    assert not any(memory)


@pytest.mark.parametrize("value", [0, 1, -1, 0x7FFFFFFF, -0x80000000, 12345])
def test_write_read_round_trip(value):
    memory = new_memory()
    write_int(memory, 100, value)
    assert read_int(memory, 100, 4) == value


def test_write_wraps_around():
    memory = new_memory()
    write_int(memory, MEM_SIZE - 2, -7)
    assert read_int(memory, MEM_SIZE - 2, 4) == -7
    assert memory[0] != 0 or memory[1] != 0
    assert memory[2] == 0


def test_short_read_sign_extends():
    memory = new_memory()
    write_int(memory, 0, -5)
    assert read_int(memory, 2, 2) == -5
    assert read_int(memory, 3, 1) == -5


def test_negative_index_wraps():
    memory = new_memory()
    write_int(memory, MEM_SIZE - 4, 99)
    assert read_int(memory, -4, 4) == 99


def test_zero_size_read():
    memory = new_memory()
    memory[10] = 0xFF
    assert read_int(memory, 10, 0) == 0


def test_load_program_copies_body():
    memory = new_memory()
    body = bytes(range(1, 11))
    load_program(memory, body, 50)
    assert bytes(memory[50:60]) == body
    assert memory[49] == 0 and memory[60] == 0


def test_load_program_truncates_at_end():
    memory = new_memory()
    body = bytes([9] * 10)
    load_program(memory, body, MEM_SIZE - 3)
    assert bytes(memory[MEM_SIZE - 3:]) == bytes([9] * 3)
    assert not any(memory[:MEM_SIZE - 3])
    assert len(memory) == MEM_SIZE


def test_format_dump_shape():
    memory = new_memory()
    memory[0] = 0xAB
    text = format_dump(memory)
    lines = text.split("\n")
    assert text.endswith("\n")
    assert lines[-1] == ""
    assert len(lines) - 1 == MEM_SIZE // 32
    assert all(len(line.split(" ")) == 32 for line in lines[:-1])
    assert lines[0].startswith("AB 00 ")


def test_decode_coding_byte():
    assert decode_coding_byte(0b01101100) == (
        ArgType.REG, ArgType.DIR, ArgType.IND, ArgType(0)
    )


def test_check_coding_byte_add():
    add = op_by_code(4)
    assert check_coding_byte(0b01010100, add) is True
    assert check_coding_byte(0b01010101, add) is False
    assert check_coding_byte(0b10010100, add) is False


def test_check_coding_byte_ld():
    ld = op_by_code(2)
    assert check_coding_byte(0b10010000, ld) is True
    assert check_coding_byte(0b11010000, ld) is True
    assert check_coding_byte(0b01010000, ld) is False


def test_empty_declared_slot_is_accepted():
    assert check_coding_byte(0, op_by_code(4)) is True


def test_arg_sizes():
    assert arg_size(ArgType.REG) == 1
    assert arg_size(ArgType.DIR) == DIR_SIZE
    assert arg_size(ArgType.IND) == IND_SIZE
    assert arg_size(ArgType(0)) == 0


def test_index_arg_sizes():
    assert index_arg_size(ArgType.REG) == 1
    assert index_arg_size(ArgType.DIR) == index_arg_size(ArgType.IND) == IND_SIZE
    assert index_arg_size(ArgType(0)) == 0