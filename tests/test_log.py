import io

from sanoemu.log import Log, debug, error, info, warning


def test_chain_returns_same_instance():
    log = Log(io.StringIO())
    assert log.text("a").sp().num(1).hex(2) is log


def test_show_writes_line_and_clears():
    stream = io.StringIO()
    log = Log(stream)
    log.text("value").sp().num(42).show()
    assert stream.getvalue() == "value 42\n"
    assert log.render() == ""


def test_hex_with_width_pads_and_uppercases():
    assert Log(io.StringIO()).hex(255, 4).render() == "0x00FF"


def test_hex_without_width():
    assert Log(io.StringIO()).hex(0xAB).render() == "0xAB"


def test_err_prefix_goes_to_stderr(capsys):
    Log.err("cpu").text("boom").show()
    captured = capsys.readouterr()
    assert captured.err == "[ERROR][cpu] boom\n"
    assert captured.out == ""


def test_level_prefixes_go_to_stdout(capsys):
    Log.wrn("a").show()
    Log.inf("b").show()
    Log.dbg("c").show()
    Log.trc("d").show()
    out = capsys.readouterr().out.splitlines()
    assert out == ["[WARN][a] ", "[INFO][b] ", "[DEBUG][c] ", "[TRACE][d] "]


def test_one_shot_helpers(capsys):
    info("hello")
    debug("dbg")
    warning("careful")
    error("bad")
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["[INFO] hello", "[DEBUG] dbg", "[WARNING] careful"]
    assert captured.err == "[ERROR] bad\n"