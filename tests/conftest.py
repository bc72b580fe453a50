"""Pytest configuration and fixtures for stock_search testing."""

import asyncio
from typing import Any, AsyncGenerator, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio

from stock_search.clients.search_client import SearchClient
from stock_search.components.chart.chart_binder import ChartBinder
from stock_search.exceptions import StockSearchError
from stock_search.schemas.stock import StockSnapshot


class FakeHandle:
    """Chart handle recording its options, surface and releases."""

    def __init__(self, options: dict, surface: Any) -> None:
        self.options = options
        self.surface = surface
        self.release_count = 0

    @property
    def released(self) -> bool:
        return self.release_count > 0

    def release(self) -> None:
        self.release_count += 1


class FakeEngine:
    """Chart engine that creates FakeHandle objects instead of widgets."""

    def __init__(self) -> None:
        self.handles: List[FakeHandle] = []

    def instantiate(self, options: dict, surface: Any) -> FakeHandle:
        handle = FakeHandle(options, surface)
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.released]


class FakeSurface:
    """Stands in for a mounted NiceGUI element."""

    def __init__(self, is_deleted: bool = False) -> None:
        self.is_deleted = is_deleted


class GatedClient:
    """
    Search client whose responses are released by the test.

    Every `search` call parks on a future keyed by symbol until
    `resolve` or `reject` is called for it.
    """

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.pending: Dict[str, asyncio.Future] = {}

    async def search(self, symbol: str) -> StockSnapshot:
        self.calls.append(symbol)
        fut = asyncio.get_running_loop().create_future()
        self.pending[symbol] = fut
        return await fut

    async def wait_for(self, symbol: str) -> None:
        for _ in range(50):
            if symbol in self.pending:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"search({symbol!r}) was never issued")

    def resolve(self, symbol: str, snapshot: StockSnapshot) -> None:
        self.pending[symbol].set_result(snapshot)

    def reject(self, symbol: str, error: StockSearchError) -> None:
        self.pending[symbol].set_exception(error)


@pytest.fixture
def aapl_payload() -> Dict[str, Any]:
    """Success payload with history in reverse chronological order."""
    return {
        "company": "AAPL",
        "current_price": 182.5,
        "suggestion": "Hold",
        "historical_data": [
            {"date": "2024-02-01", "price": 180},
            {"date": "2024-01-01", "price": 170},
        ],
    }


@pytest.fixture
def aapl_snapshot(aapl_payload) -> StockSnapshot:
    return StockSnapshot.model_validate(aapl_payload)


@pytest.fixture
def tsla_snapshot() -> StockSnapshot:
    return StockSnapshot.model_validate(
        {
            "company": "TSLA",
            "current_price": 250.0,
            "suggestion": "Buy",
            "historical_data": [
                {"date": "2024-03-01", "price": 240},
                {"date": "2024-03-02", "price": 250},
            ],
        }
    )


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def binder(engine) -> ChartBinder:
    return ChartBinder(engine=engine)


@pytest.fixture
def gated_client() -> GatedClient:
    return GatedClient()


@pytest_asyncio.fixture
async def make_search_client() -> AsyncGenerator[Callable[[Callable], SearchClient], None]:
    """Build SearchClients backed by an `httpx.MockTransport` handler."""
    opened: List[httpx.AsyncClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> SearchClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://stock.test")
        opened.append(client)
        return SearchClient(client)

    yield _make

    for client in opened:
        await client.aclose()
