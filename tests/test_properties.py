"""Property tests: revive(destination, serialize(source)) on JSON-like data."""
import copy

from hypothesis import given, settings, strategies as st

from revive_core import SnapshotReviver, ref, revive, serialize

scalars = st.none() | st.booleans() | st.integers() | st.text(max_size=5)
json_values = st.recursive(
    scalars,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=3), children, max_size=4),
    max_leaves=25,
)
roots = st.dictionaries(st.text(max_size=3), json_values, max_size=5)


@given(roots)
def test_revive_into_empty_destination(source):
    state = {}
    revive(state, serialize(source))
    assert state == source


@given(roots)
def test_revive_into_identically_shaped_destination(source):
    state = copy.deepcopy(source)
    revive(state, serialize(source))
    assert state == source


list_values = st.recursive(scalars, lambda children: st.lists(children, max_size=4), max_leaves=20)
list_roots = st.dictionaries(st.text(max_size=3), list_values, max_size=5)


@given(list_roots, roots)
def test_lists_revive_exactly_into_unrelated_destination(source, other):
    # reused dicts keep extra keys, lists are rewritten to the snapshot's length
    state = copy.deepcopy(other)
    revive(state, serialize(source))
    assert state == source


@given(roots, roots)
def test_unrelated_destination_gets_snapshot_keys(source, other):
    state = copy.deepcopy(other)
    revive(state, serialize(source))
    assert set(state) == set(source)


@given(roots)
def test_top_level_containers_are_reused(source):
    state = copy.deepcopy(source)
    before = {k: v for k, v in state.items() if isinstance(v, (list, dict))}
    revive(state, serialize(source))
    for key, container in before.items():
        assert state[key] is container


@settings(max_examples=50)
@given(st.lists(st.integers(), max_size=6), st.lists(st.integers(), max_size=6))
def test_list_length_mirrors_source(src, dst):
    state = {"xs": list(dst)}
    lst = state["xs"]
    revive(state, serialize({"xs": src}))
    assert state["xs"] is lst
    assert lst == src


@settings(max_examples=50)
@given(st.lists(st.integers(), max_size=6), st.lists(st.integers(), max_size=6))
def test_list_merge_when_truncation_disabled(src, dst):
    state = {"xs": list(dst)}
    SnapshotReviver(config={"truncate_arrays": False}).revive(state, serialize({"xs": src}))
    expected = src + dst[len(src):]
    assert state["xs"] == expected


@given(st.dictionaries(st.text(max_size=3), st.integers(), max_size=4),
       st.dictionaries(st.text(max_size=3), st.integers(), max_size=4))
def test_root_keys_match_snapshot(src, extra):
    state = dict(extra)
    revive(state, serialize(src))
    assert set(state) == set(src)


def test_root_pruning_can_be_disabled():
    state = {"old": 1}
    SnapshotReviver(config={"prune_root_keys": False}).revive(state, serialize({"new": 2}))
    assert state == {"old": 1, "new": 2}


@given(st.integers(), st.integers())
def test_shared_cell_identity(a_val, b_val):
    a, b = ref(a_val), ref(b_val)
    snap = serialize({"a": a, "b": b, "items": [a, b]})
    state = {"a": ref(0), "b": ref(0), "items": []}
    revive(state, snap)
    assert state["items"] == [state["a"], state["b"]]
    assert state["items"][0] is state["a"]
    assert (state["a"].value, state["b"].value) == (a_val, b_val)
