from sanoemu.mailbox import Mailbox

BASE = 0x400000


def make():
    return Mailbox(BASE, 1024, "Mailbox A")


def test_default_name_and_flags():
    box = Mailbox(BASE, 16)
    assert box.name == "Mailbox"
    assert box.has_new_data is False
    assert box.busy is False


def test_store_sets_flag_and_read_clears_it():
    box = make()
    box.store_byte(BASE + 5, 0x77)
    assert box.has_new_data is True
    assert box.read_byte(BASE + 5) == 0x77
    assert box.has_new_data is False


def test_write_callback_invoked_per_write():
    box = make()
    calls = []
    box.write_callback = lambda: calls.append(True)
    box.store_byte(BASE, 1)
    box.store_byte(BASE + 1, 2)
    assert len(calls) == 2


def test_out_of_bounds_write_no_callback():
    box = make()
    calls = []
    box.write_callback = lambda: calls.append(True)
    box.store_byte(BASE + 1024, 1)
    box.store_byte(BASE - 1, 1)
    assert calls == []
    assert box.has_new_data is False


def test_out_of_bounds_read_returns_ff():
    box = make()
    assert box.read_byte(BASE + 1024) == 0xFF
    assert box.read_byte(BASE - 1) == 0xFF


def test_manual_flag_control():
    box = make()
    box.set_new_data_flag()
    assert box.has_new_data is True
    box.clear_new_data_flag()
    assert box.has_new_data is False


def test_decode_address():
    box = make()
    assert box.decode_address(BASE) == BASE
    assert box.decode_address(BASE + 1023) == BASE + 1023
    assert box.decode_address(BASE + 1024) is None
    assert box.decode_address(BASE - 1) is None


def test_clear_resets_everything():
    box = make()
    box.store_byte(BASE + 3, 9)
    box.busy = True
    box.clear()
    assert box.read_byte(BASE + 3) == 0
    assert box.has_new_data is False
    assert box.busy is False
    assert bytes(box.data) == bytes(1024)