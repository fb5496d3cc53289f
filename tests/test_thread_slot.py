import threading

from stxkit.thread_slot import SlotQuery, SlotTask, ThreadSlot


def _noop():
    pass


def test_fresh_slot_query():
    slot = ThreadSlot()
    query = slot.query()
    assert query.can_push is True
    assert query.executing_task is None
    assert query.pending_task is None


def test_push_and_pop_source_case():
    slot = ThreadSlot()
    query0 = slot.query()
    slot.push_task(SlotTask(_noop, 1))
    assert slot.try_pop_task() is _noop
    assert query0.executing_task is None
    assert query0.pending_task is None
    slot.push_task(SlotTask(_noop, 1))
    assert query0 == SlotQuery(can_push=True)


def test_query_reports_pending_then_executing():
    slot = ThreadSlot()
    slot.push_task(SlotTask(_noop, 7))
    assert slot.query() == SlotQuery(can_push=False, pending_task=7, executing_task=None)
    slot.try_pop_task()
    assert slot.query() == SlotQuery(can_push=True, pending_task=None, executing_task=7)


def test_pending_can_be_pushed_while_executing():
    slot = ThreadSlot()
    slot.push_task(SlotTask(_noop, 1))
    slot.try_pop_task()
    slot.push_task(SlotTask(_noop, 2))
    assert slot.query() == SlotQuery(can_push=False, pending_task=2, executing_task=1)


def test_pop_on_empty_clears_executing():
    slot = ThreadSlot()
    slot.push_task(SlotTask(_noop, 3))
    slot.try_pop_task()
    assert slot.try_pop_task() is None
    assert slot.query().executing_task is None


def test_popped_function_runs():
    results = []
    slot = ThreadSlot()
    slot.push_task(SlotTask(lambda: results.append("ran"), 4))
    fn = slot.try_pop_task()
    fn()
    assert results == ["ran"]


def test_promise_is_kept():
    marker = object()
    assert ThreadSlot(marker).promise is marker


def test_concurrent_push_and_pop_lose_no_task():
    slot = ThreadSlot()
    popped = []
    count = 200

    def worker():
        while len(popped) < count:
            fn = slot.try_pop_task()
            if fn is not None:
                popped.append(fn())

    thread = threading.Thread(target=worker)
    thread.start()
    for index in range(count):
        while not slot.query().can_push:
            pass
        slot.push_task(SlotTask(lambda value=index: value, index))
    thread.join(timeout=10)
    assert not thread.is_alive()
    assert popped == list(range(count))
    assert slot.query() == SlotQuery(
        can_push=True, pending_task=None, executing_task=count - 1
    )