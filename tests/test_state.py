import io

import pytest

from ifupdown_ng.interface import Interface, InterfaceCollection
from ifupdown_ng.state import State, StateRecord


def _state(text):
    state = State()
    state.read(io.StringIO(text))
    return state


def test_read_full_and_bare_lines():
    records = dict(_state("eth0=eth0 2 explicit\nbr0\n"))
    assert records["eth0"] == StateRecord("eth0", 2, True)
    assert records["br0"] == StateRecord("br0", 1, False)


def test_read_mapped_name():
    records = dict(_state("eth0.1=vlan1 3\n"))
    assert records["eth0.1"] == StateRecord("vlan1", 3, False)


@pytest.mark.parametrize("count", ["0", "abc", "-1"])
def test_invalid_refcount_becomes_one(count):
    records = dict(_state(f"eth0=eth0 {count}\n"))
    assert records["eth0"].refcount == 1


def test_write_matches_input():
    text = "eth0=eth0 2 explicit\nbr0=br0 1\n"
    out = io.StringIO()
    _state(text).write(out)
    assert out.getvalue() == text


def test_round_trip_through_file(tmp_path):
    original = _state("a=b 4 explicit\nc=c 1\n")
    path = tmp_path / "ifstate"
    original.write_path(str(path))
    again = State()
    again.read_path(str(path))
    assert list(again) == list(original)


def test_read_missing_path_is_empty(tmp_path):
    state = State()
    state.read_path(str(tmp_path / "missing"))
    assert len(state) == 0


def test_write_path_failure_raises(tmp_path):
    with pytest.raises(OSError):
        _state("a 1\n").write_path(str(tmp_path))


def test_duplicate_names_keep_last():
    state = _state("a=a 1\na=b 2\n")
    assert list(state) == [("a", StateRecord("b", 2, False))]


def test_upsert_moves_to_end():
    state = _state("a 1\nb 1\n")
    state.upsert("a", Interface("a"))
    assert [name for name, _ in state] == ["b", "a"]


def test_ref_and_unref():
    state = State()
    iface = Interface("eth0")
    state.ref("eth0", iface)
    state.ref("eth0", iface)
    assert iface.refcount == 2
    assert dict(state)["eth0"].refcount == 2
    state.unref("eth0", iface)
    assert dict(state)["eth0"].refcount == 1
    state.unref("eth0", iface)
    assert iface.refcount == 0
    assert len(state) == 0


def test_unref_at_zero_is_noop():
    state = State()
    iface = Interface("eth0")
    state.unref("eth0", iface)
    assert iface.refcount == 0
    assert len(state) == 0


def test_delete():
    state = _state("a 1\nb 1\n")
    state.delete("a")
    assert [name for name, _ in state] == ["b"]


def test_lookup():
    collection = InterfaceCollection()
    target = collection.find_or_create("eth1")
    state = _state("eth0=eth1 1\nx=unknown 1\n")
    assert state.lookup(collection, "eth0") is target
    assert state.lookup(collection, "x") is None
    assert state.lookup(collection, "nothing") is None


def test_sync_creates_and_updates():
    collection = InterfaceCollection()
    state = _state("x=y 4 explicit\n")
    state.sync(collection)
    iface = collection.find("y")
    assert iface is not None
    assert iface.refcount == 4
    assert iface.is_explicit