from nicegui import ui, ElementFilter
from fastapi import Request
from typing import Any, Optional
import logging

from stock_search.static.style import add_style, change_colors
from stock_search.clients.search_client import SearchClient
from stock_search.components.chart.chart_binder import ChartBinder, CHART_SURFACE_MARKER
from stock_search.services.search_controller import SearchController
from stock_search.storage.search_state import SearchState

logger = logging.getLogger(__name__)


def find_chart_surface(client: Any, marker: str = CHART_SURFACE_MARKER) -> Optional[ui.element]:
    """
    Look up the mounted chart surface of `client` by its marker.

    Deleted elements are no longer part of the client, so an unmounted
    surface yields None.
    """
    with client:
        return next(iter(ElementFilter(marker=marker)), None)


def bind_to_client(controller: SearchController, client: Any) -> None:
    """
    Release the controller together with the client.

    Tied to deletion, not to disconnect: a browser that reconnects after a
    short network drop keeps its page, its chart and its pending search.
    """
    client.on_delete(controller.close)


class MarketPage:
    """
    Market page: a symbol search box, the result header and the price history chart.

    The page only reads `SearchState` snapshots pushed by its `SearchController`;
    all sequencing lives in the controller.
    """
    def __init__(self, request: Request) -> None:
        """
        Initialize the page and bind it to a fresh controller.

        Args:
            request: FastAPI request object for the current page.
        """
        logger.info("MarketPage: initializing page")
        self.request = request
        self.client = ui.context.client

        self.search_input = None
        self.loading_label = None
        self.error_label = None
        self.header = None
        self.company_label = None
        self.price_badge = None
        self.suggestion_label = None

        self.controller = SearchController(
            SearchClient(),
            ChartBinder(),
            surface=lambda: find_chart_surface(self.client),
        )
        self.controller.subscribe(self.render_state)

        self.build_ui()
        self.render_state(self.controller.state)

        bind_to_client(self.controller, self.client)

    def build_ui(self) -> None:
        """
        Create the static layout; visibility is driven by `render_state`.
        """
        logger.info("MarketPage.build_ui: building layout")
        with ui.element('div').classes('container'):
            ui.label('Stock Analysis').classes('text-h5 text-bold')

            with ui.element('div').classes('search-container'):
                self.search_input = (
                    ui.input(placeholder='Enter stock symbol (e.g., TSLA)')
                    .props('outlined dense clearable color=primary')
                    .classes('w-[320px]')
                )
                self.search_input.on('keydown.enter', self.search)
                ui.button('Search', on_click=self.search).props('unelevated color=primary')

            self.loading_label = ui.label('Loading...').classes('loading')
            self.error_label = ui.label('').classes('error')

            with ui.element('div').classes('header') as self.header:
                self.header.props('id=stockHeader')
                self.company_label = ui.label('').classes('text-h4 text-bold')
                self.price_badge = ui.label('').classes('price-badge')
                self.suggestion_label = ui.label('').classes('suggestion')

            ui.element('div').classes('chart-container').props('id=chartContainer').mark(CHART_SURFACE_MARKER)

    async def search(self) -> None:
        """
        Submit the current input value.
        """
        value = self.search_input.value if self.search_input else ''
        logger.info(f"MarketPage.search: submitting {value!r}")
        await self.controller.submit(value or '')

    def render_state(self, state: SearchState) -> None:
        """
        Project a state snapshot onto the widgets.

        Loading indicator, error message and result header are mutually exclusive.

        Args:
            state: The state to display.
        """
        logger.debug(f"MarketPage.render_state: status={state.status.value}, generation={state.generation}")
        if self.loading_label is None:
            return

        self.loading_label.set_visibility(state.loading)

        self.error_label.text = state.error
        self.error_label.set_visibility(state.show_error)

        if state.show_header:
            snapshot = state.snapshot
            self.company_label.text = snapshot.company
            self.price_badge.text = snapshot.current_price_fmt
            self.suggestion_label.text = snapshot.suggestion
        self.header.set_visibility(state.show_header)


@ui.page('/')
async def market_route(request: Request):

    add_style()
    change_colors()

    MarketPage(request)
