from corevm.cli import main, usage

LIVE_ONE = bytes([1, 0, 0, 0, 1])


def _champion_file(tmp_path, filename, name, body=LIVE_ONE, magic=b"\x00\xea\x83\xf3"):
    header = bytearray(2192)
    header[0:4] = magic
    header[4:4 + len(name)] = name
    header[136:140] = len(body).to_bytes(4, "big")
    path = tmp_path / filename
    path.write_bytes(bytes(header) + body)
    return str(path)


def test_help(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == usage()


def test_usage_mentions_options():
    text = usage()
    assert text.startswith("USAGE\n")
    assert "-dump nbr_cycle" in text
    assert "-a load_adress" in text


def test_single_argument_fails(capsys):
    assert main(["a.cor"]) == 84
    assert capsys.readouterr().out == ""


def test_no_arguments_fails():
    assert main([]) == 84


def test_missing_file_fails(tmp_path):
    first = _champion_file(tmp_path, "a.cor", b"alpha")
    assert main([first, str(tmp_path / "missing.cor")]) == 84


def test_bad_magic_fails(tmp_path):
    first = _champion_file(tmp_path, "a.cor", b"alpha")
    second = _champion_file(tmp_path, "b.cor", b"beta", magic=b"\x00\x00\x00\x00")
    assert main([first, second]) == 84


def test_game_with_dump(tmp_path, capsys):
    first = _champion_file(tmp_path, "a.cor", b"alpha")
    second = _champion_file(tmp_path, "b.cor", b"beta")
    assert main(["-dump", "0", first, second]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "The player 1(alpha) is alive." in lines
    assert "The player 1(alpha) has won." in lines
    dump_lines = [line for line in lines if not line.startswith("The player")]
    assert dump_lines[0].startswith("01 00 00 00 01 00")
    assert all(len(line.split()) == 32 for line in dump_lines)