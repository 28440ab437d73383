"""Wire form (tagged lists) and its JSON encoding."""
import pytest

from revive_core import (
    IndexStep, KeyStep, NestedStep, ReviveError, Snapshot, SnapshotFormatError,
    computed, ref, revive, serialize,
)


def _sample():
    shared = ref(1)
    return {
        "a": shared,
        "items": [shared, {"k": "v"}],
        "fn": print,
        "double": computed(lambda: shared.value * 2),
    }


def test_to_wire_matches_tagged_layout():
    wire = serialize(_sample()).to_wire()
    assert wire == [
        ["_", {"a": 1, "items": 3, "fn": 6, "double": 7}],
        ["r", 2, [["a"], ["items", [0]]]],
        ["v", 1],
        ["a", [1, 4], [["items"]]],
        ["o", {"k": 5}, [["items", [1]]]],
        ["v", "v"],
        ["k", [["fn"]]],
        ["k", [["double"]]],
    ]


def test_from_wire_parses_steps():
    snap = Snapshot.from_wire([
        ["_", {"a": 1}],
        ["a", [], [["a", [0], ["b", 2]]]],
    ])
    assert snap[1].paths == [(KeyStep("a"), IndexStep(0), NestedStep((KeyStep("b"), KeyStep(2))))]
    assert snap.to_wire()[1] == ["a", [], [["a", [0], ["b", 2]]]]


def test_revive_accepts_wire_list():
    state = {"a": ref(0), "items": [], "fn": print, "double": None}
    revive(state, serialize(_sample()).to_wire())
    assert state["a"].value == 1
    assert state["items"][0] is state["a"]
    assert state["items"][1] == {"k": "v"}
    assert state["fn"] is print
    assert state["double"] is None


def test_json_roundtrip_and_digest():
    snap = serialize(_sample())
    again = Snapshot.loads(snap.dumps())
    assert again.to_wire() == snap.to_wire()
    assert again.digest() == snap.digest()
    assert len(snap.digest()) == 16


def test_digest_changes_with_contents():
    assert serialize({"a": 1}).digest() != serialize({"a": 2}).digest()


def test_snapshot_not_consumed_by_revive():
    snap = serialize({"a": [1, 2], "c": ref("x")})
    before = snap.to_wire()
    first, second = {}, {}
    revive(first, snap)
    revive(second, snap)
    assert snap.to_wire() == before
    assert first["a"] == second["a"] == [1, 2]
    assert first["a"] is not second["a"]


@pytest.mark.parametrize("bad", [
    [],
    [["v", 1]],
    [["_", {}], ["x", 1]],
    [["_", {}], ["a", [1]]],
    "not a list",
])
def test_malformed_wire_rejected(bad):
    with pytest.raises(SnapshotFormatError):
        Snapshot.from_wire(bad)


def test_loads_rejects_bad_json():
    with pytest.raises(SnapshotFormatError):
        Snapshot.loads(b"{nope")


def test_revive_wraps_format_errors():
    with pytest.raises(ReviveError):
        revive({}, [["v", 1]])


def test_revive_rejects_dangling_pointer():
    with pytest.raises(ReviveError):
        revive({}, [["_", {"a": 5}]])


@pytest.mark.parametrize("state", [
    {"m": {1: "one"}},
    {"m": [{None: "nothing"}]},
    {2: "root key"},
])
def test_dumps_rejects_non_string_keys(state):
    snap = serialize(state)
    with pytest.raises(SnapshotFormatError, match="not a string"):
        snap.dumps()
    assert len(snap.digest()) == 16


def test_non_string_keys_survive_wire_list():
    source = {"m": {1: "one", "2": "two"}}
    state = {}
    revive(state, Snapshot.from_wire(serialize(source).to_wire()))
    assert state == source
