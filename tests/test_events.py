import asyncio

from remote_client.core.events import Event


def test_handlers_run_in_order_and_failures_are_isolated():
    calls = []

    def broken(value):
        raise RuntimeError("boom")

    async def later(value):
        await asyncio.sleep(0)
        calls.append(("async", value))

    event = Event("message")
    event.subscribe(lambda value: calls.append(("sync", value)))
    event.subscribe(broken)
    event.subscribe(later)

    asyncio.run(event.emit(1))
    assert calls == [("sync", 1), ("async", 1)]


def test_unsubscribe():
    calls = []
    event = Event("open")
    unsubscribe = event.subscribe(lambda: calls.append("open"))
    assert len(event) == 1
    unsubscribe()
    unsubscribe()
    asyncio.run(event.emit())
    assert calls == []
    assert len(event) == 0
