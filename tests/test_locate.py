from revive_core import MISSING, IndexStep, KeyStep, NestedStep, locate, ref
from revive_core.decoder import walk


def is_list(v):
    return isinstance(v, list)


def always(v):
    return True


def test_walk_plain_key_and_index():
    base = {"items": [["a", "b"], ["c"]]}
    path = (KeyStep("items"), IndexStep(0), IndexStep(1))
    assert walk(base, path) == "b"


def test_walk_missing_key_and_out_of_range_index():
    base = {"items": [1]}
    assert walk(base, (KeyStep("nope"),)) is MISSING
    assert walk(base, (KeyStep("items"), IndexStep(3))) is MISSING
    assert walk(base, (KeyStep("items"), IndexStep(-1))) is MISSING


def test_walk_nested_step():
    base = {"m": {"k": [0, 42]}}
    path = (KeyStep("m"), NestedStep((KeyStep("k"), IndexStep(1))))
    assert walk(base, path) == 42


def test_walk_none_value_is_found():
    assert walk({"a": None}, (KeyStep("a"),)) is None


def test_walk_steps_through_cells_with_unwrap():
    base = {"a": ref([ref(5)])}
    path = (KeyStep("a"), IndexStep(0))
    assert walk(base, path) is MISSING
    found = walk(base, path, unwrap=lambda v: v.value if hasattr(v, "subscribe") else v)
    assert found.value == 5


def test_locate_first_matching_path_wins():
    first, second = [1], [2]
    base = {"x": "not a list", "y": first, "z": second}
    paths = [(KeyStep("x"),), (KeyStep("y"),), (KeyStep("z"),)]
    assert locate(base, paths, is_list) is first


def test_locate_condition_rejects_kind_change():
    assert locate({"a": {"k": 1}}, [(KeyStep("a"),)], is_list) is MISSING


def test_locate_skips_empty_path():
    base = [1]
    assert locate(base, [()], always) is MISSING


def test_locate_not_found():
    assert locate({}, [(KeyStep("a"),), (KeyStep("b"), IndexStep(0))], always) is MISSING


def test_walk_long_index_path():
    tree = "leaf"
    for _ in range(3000):
        tree = [tree]
    path = (KeyStep("t"),) + (IndexStep(0),) * 3000
    assert walk({"t": tree}, path) == "leaf"
    assert walk({"t": tree}, path + (IndexStep(0),)) is MISSING
