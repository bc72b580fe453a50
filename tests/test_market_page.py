"""Tests for the market page projection and its client lifecycle."""

import asyncio
from typing import Any, Callable, List
from unittest.mock import AsyncMock, Mock

import pytest

import stock_search.pages.market as market
from stock_search.pages.error import error_title
from stock_search.pages.market import MarketPage, bind_to_client, find_chart_surface
from stock_search.services.search_controller import SearchController
from stock_search.storage.search_state import IDLE_STATE, begin, fail, succeed


class FakeWidget:
    """Label-like widget exposing the attributes `render_state` touches."""

    def __init__(self) -> None:
        self.text = ""
        self.visible = True

    def set_visibility(self, visible: bool) -> None:
        self.visible = visible


class FakeClient:
    """Mimics the lifecycle hooks of a NiceGUI client."""

    def __init__(self) -> None:
        self.connect_handlers: List[Callable] = []
        self.disconnect_handlers: List[Callable] = []
        self.delete_handlers: List[Callable] = []
        self.entered = 0

    def on_connect(self, handler: Callable) -> None:
        self.connect_handlers.append(handler)

    def on_disconnect(self, handler: Callable) -> None:
        self.disconnect_handlers.append(handler)

    def on_delete(self, handler: Callable) -> None:
        self.delete_handlers.append(handler)

    def disconnect(self) -> None:
        for handler in self.disconnect_handlers:
            handler()

    def reconnect(self) -> None:
        for handler in self.connect_handlers + self.disconnect_handlers:
            handler()

    def delete(self) -> None:
        for handler in self.delete_handlers:
            handler()

    def __enter__(self) -> "FakeClient":
        self.entered += 1
        return self

    def __exit__(self, *args: Any) -> None:
        pass


def _page() -> MarketPage:
    page = MarketPage.__new__(MarketPage)
    page.loading_label = FakeWidget()
    page.error_label = FakeWidget()
    page.header = FakeWidget()
    page.company_label = FakeWidget()
    page.price_badge = FakeWidget()
    page.suggestion_label = FakeWidget()
    return page


def _visible(page: MarketPage) -> dict:
    return {
        "loading": page.loading_label.visible,
        "error": page.error_label.visible,
        "header": page.header.visible,
    }


class TestRenderState:
    """Test that loading, error and header are mutually exclusive on the widgets."""

    def test_idle_shows_nothing(self):
        page = _page()

        page.render_state(IDLE_STATE)

        assert _visible(page) == {"loading": False, "error": False, "header": False}

    def test_loading(self):
        page = _page()

        page.render_state(begin(IDLE_STATE, "AAPL", 1))

        assert _visible(page) == {"loading": True, "error": False, "header": False}

    def test_failure(self):
        page = _page()

        page.render_state(fail(begin(IDLE_STATE, "ZZZZ", 1), 1, "Unknown symbol"))

        assert _visible(page) == {"loading": False, "error": True, "header": False}
        assert page.error_label.text == "Unknown symbol"

    def test_success(self, aapl_snapshot):
        page = _page()

        page.render_state(succeed(begin(IDLE_STATE, "AAPL", 1), 1, aapl_snapshot))

        assert _visible(page) == {"loading": False, "error": False, "header": True}
        assert page.company_label.text == "AAPL"
        assert page.price_badge.text == "$182.50"
        assert page.suggestion_label.text == "Hold"

    def test_new_submit_hides_previous_result(self, aapl_snapshot):
        page = _page()
        page.render_state(succeed(begin(IDLE_STATE, "AAPL", 1), 1, aapl_snapshot))

        page.render_state(begin(IDLE_STATE, "TSLA", 2))

        assert _visible(page) == {"loading": True, "error": False, "header": False}

    @pytest.mark.asyncio
    async def test_follows_controller(self, binder, surface, gated_client, aapl_snapshot):
        """The page reflects every state the controller publishes."""
        page = _page()
        controller = SearchController(gated_client, binder, surface=lambda: surface, reject_empty_query=False)
        controller.subscribe(page.render_state)

        task = asyncio.create_task(controller.submit("AAPL"))
        await gated_client.wait_for("AAPL")
        assert _visible(page) == {"loading": True, "error": False, "header": False}

        gated_client.resolve("AAPL", aapl_snapshot)
        await task
        assert _visible(page) == {"loading": False, "error": False, "header": True}


class TestClientLifecycle:
    """Test that the chart lives as long as the client, not the connection."""

    @pytest.mark.asyncio
    async def test_reconnect_keeps_chart(self, binder, engine, surface, aapl_snapshot):
        controller = SearchController(
            Mock(search=AsyncMock(return_value=aapl_snapshot)),
            binder,
            surface=lambda: surface,
            reject_empty_query=False,
        )
        client = FakeClient()
        bind_to_client(controller, client)
        await controller.submit("AAPL")

        client.disconnect()
        client.reconnect()

        assert len(engine.live) == 1
        assert controller.state.show_header

    @pytest.mark.asyncio
    async def test_reconnect_keeps_pending_search(self, binder, engine, surface, gated_client, aapl_snapshot):
        controller = SearchController(gated_client, binder, surface=lambda: surface, reject_empty_query=False)
        client = FakeClient()
        bind_to_client(controller, client)

        task = asyncio.create_task(controller.submit("AAPL"))
        await gated_client.wait_for("AAPL")
        client.disconnect()
        client.reconnect()
        gated_client.resolve("AAPL", aapl_snapshot)
        state = await task

        assert state.show_header
        assert len(engine.live) == 1

    @pytest.mark.asyncio
    async def test_client_deletion_releases_chart(self, binder, engine, surface, aapl_snapshot):
        controller = SearchController(
            Mock(search=AsyncMock(return_value=aapl_snapshot)),
            binder,
            surface=lambda: surface,
            reject_empty_query=False,
        )
        client = FakeClient()
        bind_to_client(controller, client)
        await controller.submit("AAPL")

        client.delete()

        assert engine.live == []
        assert binder.handle is None


class TestFindChartSurface:
    """Test the marker based surface lookup."""

    @pytest.fixture
    def element_filter(self, monkeypatch):
        seen = {"markers": [], "found": []}

        class FakeElementFilter:
            def __init__(self, *, marker: str) -> None:
                seen["markers"].append(marker)

            def __iter__(self):
                return iter(seen["found"])

        monkeypatch.setattr(market, "ElementFilter", FakeElementFilter)
        return seen

    def test_returns_marked_element(self, element_filter):
        client = FakeClient()
        surface = object()
        element_filter["found"].append(surface)

        assert find_chart_surface(client) is surface
        assert element_filter["markers"] == ["stockChart"]
        assert client.entered == 1

    def test_missing_surface(self, element_filter):
        assert find_chart_surface(FakeClient()) is None


class TestErrorTitle:
    """Test the error page headline."""

    @pytest.mark.parametrize(
        "status, title",
        [
            (502, "The stock service is unavailable"),
            (404, "Page not found"),
            (500, "Something went wrong"),
        ],
    )
    def test_titles(self, status, title):
        assert error_title(status) == title
