import threading

import pytest

from stxkit import rc
from stxkit.rc import (
    Manager,
    Rc,
    RcOperation,
    RefCount,
    Unique,
    UniqueRcOperation,
    cast,
    make,
    make_static,
    make_unique,
    make_unique_static,
    transmute,
)


def test_refcount_returns_previous_values():
    count = RefCount(0)
    assert count.ref() == 0
    assert count.ref() == 1
    assert count.unref() == 2
    assert count.count == 1


def test_refcount_unref_at_zero_raises():
    with pytest.raises(RuntimeError):
        RefCount(0).unref()


def test_refcount_negative_initial_raises():
    with pytest.raises(ValueError):
        RefCount(-1)


def test_refcount_is_thread_safe():
    count = RefCount(0)

    def work():
        for _ in range(1000):
            count.ref()

    threads = [threading.Thread(target=work) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert count.count == 4000


def test_default_manager_is_stub():
    manager = Manager()
    manager.ref()
    manager.unref()
    assert manager.is_stub


def test_rc_operation_runs_once_on_last_unref():
    calls = []
    op = RcOperation(0, lambda: calls.append("done"))
    op.ref()
    op.ref()
    op.unref()
    assert calls == []
    op.unref()
    assert calls == ["done"]


def test_unique_rc_operation_runs_on_unref():
    calls = []
    op = UniqueRcOperation(lambda: calls.append("done"))
    op.ref()
    assert calls == []
    op.unref()
    assert calls == ["done"]


def test_make_releases_after_last_share():
    released = []
    first = make([1, 2, 3], released.append)
    second = first.share()
    assert second.handle is first.handle
    first.release()
    assert released == []
    second.release()
    assert released == [[1, 2, 3]]


def test_release_twice_is_noop():
    released = []
    holder = make("value", released.append)
    holder.release()
    holder.release()
    assert released == ["value"]
    assert holder.released


def test_share_after_release_raises():
    holder = make("value")
    holder.release()
    with pytest.raises(RuntimeError):
        holder.share()


def test_rc_context_manager_releases():
    released = []
    with make("value", released.append) as holder:
        assert holder.handle == "value"
        assert released == []
    assert released == ["value"]


def test_make_static_never_runs_anything():
    obj = {"key": 1}
    holder = make_static(obj)
    shared = holder.share()
    holder.release()
    shared.release()
    assert shared.handle is obj
    assert obj == {"key": 1}


def test_make_unique_releases_once():
    released = []
    holder = make_unique("value", released.append)
    assert isinstance(holder, Unique)
    holder.release()
    holder.release()
    assert released == ["value"]


def test_unique_cannot_share():
    holder = make_unique_static("value")
    assert not hasattr(holder, "share")
    assert holder.handle == "value"


def test_transmute_moves_manager():
    released = []
    source = make("abc", released.append)
    target = transmute(len("abc"), source)
    assert isinstance(target, Rc)
    assert target.handle == 3
    assert source.released
    source.release()
    assert released == []
    target.release()
    assert released == ["abc"]


def test_transmute_unique_keeps_kind():
    released = []
    source = make_unique("abc", released.append)
    target = transmute("view", source)
    assert isinstance(target, Unique)
    target.release()
    assert released == ["abc"]


def test_transmute_released_source_raises():
    source = make("abc")
    source.release()
    with pytest.raises(RuntimeError):
        transmute("x", source)


def test_cast_converts_handle():
    released = []
    source = make("hello", released.append)
    target = cast(str.upper, source)
    assert target.handle == "HELLO"
    assert source.released
    target.release()
    assert released == ["hello"]


def test_cast_rejects_non_resource():
    with pytest.raises(TypeError):
        cast(str, "plain")


def test_shared_manager_handle_equality():
    holder = rc.make("value")
    shared = holder.share()
    assert holder.manager == shared.manager
    holder.release()
    shared.release()
    assert shared.manager.is_stub