import asyncio
import threading

from texia.ui.loader import ScreenLoader


def test_load_stores_records():
    loader = ScreenLoader(lambda: [1, 2, 3], label="telas")

    assert asyncio.run(loader.load()) is True
    assert loader.records == [1, 2, 3]
    assert loader.error is None
    assert loader.loading is False


def test_fetch_failure_sets_error_and_empties_records():
    calls = {"n": 0}

    def fetch():
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("sin conexión")
        return ["a"]

    loader = ScreenLoader(fetch, label="inventario")
    asyncio.run(loader.load())
    assert loader.records == ["a"]

    assert asyncio.run(loader.load()) is True
    assert loader.records == []
    assert loader.error == "Error al cargar inventario: sin conexión"

    loader.dismiss_error()
    assert loader.error is None


def test_stale_result_is_dropped():
    release = threading.Event()
    calls: list[int] = []

    def fetch():
        calls.append(len(calls))
        if len(calls) == 1:
            release.wait(timeout=5)
            return ["viejo"]
        return ["nuevo"]

    loader = ScreenLoader(fetch, label="progreso")

    async def scenario():
        first = asyncio.create_task(loader.load())
        await asyncio.sleep(0.05)
        second = await loader.load()
        release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert first is False
    assert second is True
    assert loader.records == ["nuevo"]
    assert loader.loading is False


def test_result_after_close_is_discarded():
    release = threading.Event()

    def fetch():
        release.wait(timeout=5)
        return ["tarde"]

    loader = ScreenLoader(fetch, label="telas")

    async def scenario():
        task = asyncio.create_task(loader.load())
        await asyncio.sleep(0.05)
        loader.close()
        release.set()
        return await task

    assert asyncio.run(scenario()) is False
    assert loader.records == []
    assert loader.error is None


def test_closed_loader_does_not_fetch():
    calls: list[int] = []
    loader = ScreenLoader(lambda: calls.append(1) or [], label="telas")
    loader.close()

    assert asyncio.run(loader.load()) is False
    assert calls == []


class _FakeClient:
    def __init__(self):
        self.disconnect_handlers: list = []
        self.delete_handlers: list = []

    def on_disconnect(self, handler):
        self.disconnect_handlers.append(handler)

    def on_delete(self, handler):
        self.delete_handlers.append(handler)

    def drop_connection(self):
        for handler in self.disconnect_handlers:
            handler()

    def delete(self):
        for handler in self.delete_handlers:
            handler()


def test_loader_keeps_fetching_after_connection_drop():
    calls: list[int] = []

    def fetch():
        calls.append(1)
        return [len(calls)]

    client = _FakeClient()
    loader = ScreenLoader(fetch, label="progreso")
    loader.attach(client)
    asyncio.run(loader.load())

    client.drop_connection()

    assert asyncio.run(loader.load()) is True
    assert loader.records == [2]
    assert calls == [1, 1]


def test_loader_closes_when_client_is_deleted():
    calls: list[int] = []
    client = _FakeClient()
    loader = ScreenLoader(lambda: calls.append(1) or ["x"], label="telas")
    loader.attach(client)

    client.delete()

    assert loader.active is False
    assert asyncio.run(loader.load()) is False
    assert calls == []
