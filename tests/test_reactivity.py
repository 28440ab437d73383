import pytest

from revive_core.reactivity import Computed, Ref, computed, is_computed, is_ref, ref


def test_ref_notifies_subscribers_on_change_only():
    r = ref(1)
    seen = []
    unsubscribe = r.subscribe(seen.append)
    r.value = 1
    r.value = 2
    unsubscribe()
    r.value = 3
    assert seen == [2]


def test_containers_compare_by_identity():
    r = ref([1])
    seen = []
    r.subscribe(seen.append)
    r.value = r.value
    r.value = [1]
    assert len(seen) == 1


def test_computed_is_lazy_and_cached():
    calls = []
    a = ref(2)

    def double():
        calls.append(1)
        return a.value * 2

    c = computed(double)
    assert calls == []
    assert c.value == 4
    assert c.value == 4
    assert len(calls) == 1
    a.value = 5
    assert c.value == 10
    assert len(calls) == 2


def test_computed_chain_and_subscribers():
    a = ref(1)
    b = computed(lambda: a.value + 1)
    c = computed(lambda: b.value * 10)
    seen = []
    c.subscribe(seen.append)
    assert c.value == 20
    a.value = 2
    assert seen == [30]
    assert c.value == 30


def test_computed_is_read_only():
    c = computed(lambda: 1)
    with pytest.raises(AttributeError):
        c.value = 2


def test_capability_checks():
    r, c = Ref(), Computed(lambda: 0)
    assert is_ref(r) and not is_computed(r)
    assert is_ref(c) and is_computed(c)
    assert not is_ref({"value": 1})
    assert not is_ref(None)
