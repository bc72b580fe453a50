from typing import Any, Callable, List, Optional
import logging

from stock_search.clients.search_client import SearchClient
from stock_search.components.chart.chart_binder import ChartBinder
from stock_search.config import settings
from stock_search.exceptions import DomainError, MalformedDataPoint, StockSearchError, SurfaceUnavailable
from stock_search.schemas.stock import StockSnapshot
from stock_search.storage.search_state import IDLE_STATE, SearchState, begin, fail, settle, succeed

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Error fetching stock data"
EMPTY_QUERY_MESSAGE = "Enter a stock symbol"

StateListener = Callable[[SearchState], None]


class SearchController:
    """
    Drives one search widget: submit -> Loading -> Success | Failure.

    Every submit gets a new generation number. Completions belonging to an
    older generation are dropped, so the last submitted query always wins.
    Each transition produces a new immutable `SearchState` which is pushed
    to the subscribed listeners.
    """

    def __init__(
        self,
        client: SearchClient,
        binder: ChartBinder,
        surface: Callable[[], Any] = lambda: None,
        reject_empty_query: Optional[bool] = None,
    ) -> None:
        """
        Args:
            client: Backend client used to look symbols up.
            binder: Owner of the price history chart.
            surface: Returns the element the chart is drawn on (None if not mounted).
            reject_empty_query: Overrides `settings.REJECT_EMPTY_QUERY`.
        """
        self.client = client
        self.binder = binder
        self.surface = surface
        self.reject_empty_query = (
            settings.REJECT_EMPTY_QUERY if reject_empty_query is None else reject_empty_query
        )
        self.state: SearchState = IDLE_STATE
        self._generation = 0
        self._listeners: List[StateListener] = []

    @property
    def loading(self) -> bool:
        return self.state.loading

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register `listener` for state changes; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _apply(self, new_state: SearchState) -> None:
        if new_state is self.state:
            return
        self.state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception(f"SearchController: state listener {listener!r} failed")

    def _is_stale(self, generation: int) -> bool:
        stale = generation != self._generation
        if stale:
            logger.info(
                f"SearchController: discarding completion of generation {generation} "
                f"(current {self._generation})"
            )
        return stale

    async def submit(self, query: str) -> SearchState:
        """
        Start a search for `query` and wait for its completion.

        Args:
            query: Raw input; surrounding whitespace is stripped.

        Returns:
            The controller state after this request finished. If a newer
            submit happened meanwhile, that newer state is returned untouched.
        """
        query = (query or "").strip()
        self._generation += 1
        generation = self._generation
        logger.info(f"SearchController.submit: query={query!r}, generation={generation}")

        self._apply(begin(self.state, query, generation))
        try:
            if not query:
                if self.reject_empty_query:
                    logger.info("SearchController.submit: empty query rejected")
                    self._apply(fail(self.state, generation, EMPTY_QUERY_MESSAGE))
                    return self.state
                logger.warning("SearchController.submit: dispatching empty query")

            try:
                snapshot = await self.client.search(query)
            except StockSearchError as e:
                if self._is_stale(generation):
                    return self.state
                message = e.message if isinstance(e, DomainError) else FETCH_ERROR_MESSAGE
                logger.info(f"SearchController.submit: {type(e).__name__} -> {message!r}")
                self._apply(fail(self.state, generation, message))
                return self.state

            if self._is_stale(generation):
                return self.state
            self._show(generation, snapshot)
        except Exception:
            logger.exception(f"SearchController.submit: unexpected error for query={query!r}")
            self._apply(fail(self.state, generation, FETCH_ERROR_MESSAGE))
        finally:
            self._apply(settle(self.state, generation))
        return self.state

    def _show(self, generation: int, snapshot: StockSnapshot) -> None:
        """Bind the history chart, then publish Success; chart problems become Failure."""
        try:
            self.binder.render(snapshot.historical_data, self.surface())
        except (SurfaceUnavailable, MalformedDataPoint) as e:
            logger.warning(f"SearchController: chart not rendered: {e.message}")
            self._apply(fail(self.state, generation, e.message))
            return
        self._apply(succeed(self.state, generation, snapshot))

    def close(self) -> None:
        """Invalidate any in-flight request and release the chart."""
        self._generation += 1
        self.binder.dispose()
        logger.info("SearchController.close: controller closed")
