import httpx
import logging
from typing import Optional, Dict, Any
from nicegui import app
from pydantic import ValidationError

from stock_search.exceptions import DomainError, TransportError
from stock_search.schemas.stock import StockSnapshot, SearchErrorPayload

logger = logging.getLogger(__name__)


class SearchClient:
    """
    Thin async client for the stock search backend.

    Uses a shared `httpx.AsyncClient` stored in `app.state.search_httpx`
    unless a client is passed in explicitly.
    """
    SEARCH_PATH = "/search"

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        """
        Bind this client to an AsyncClient, by default the shared one in `app.state.search_httpx`.
        """
        self.client: httpx.AsyncClient = client if client is not None else app.state.search_httpx
        logger.info("SearchClient initialized with shared httpx.AsyncClient")

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response | None:
        """
        Perform an HTTP request to the search backend.

        Args:
            method: HTTP method (e.g., "GET").
            url: Path or absolute URL. If path-like, the client's base_url is used.
            params: Query parameters.

        Returns:
            httpx.Response on success, or None if a timeout/HTTP error occurred.
        """
        try:
            resp = await self.client.request(method, url, params=params)
        except (httpx.ConnectTimeout, httpx.ReadTimeout):
            logger.warning(f"Search service timeout {url}")
            return None
        except httpx.HTTPError:
            logger.error(f"Search service HTTP error {url}")
            return None

        return resp

    async def search(self, symbol: str) -> StockSnapshot:
        """
        Look up a stock symbol.

        Args:
            symbol: Stock symbol as typed by the user (e.g. "AAPL").

        Returns:
            The parsed `StockSnapshot`.

        Raises:
            DomainError: the backend answered with an `{"error": ...}` payload.
            TransportError: no response, non-2xx status, undecodable or invalid body.
        """
        logger.info(f"search: symbol={symbol!r}")

        resp = await self._request("GET", self.SEARCH_PATH, params={"company": symbol})
        if resp is None:
            logger.warning(f"search({symbol!r}): no response from service")
            raise TransportError()

        if not resp.is_success:
            logger.error(f"search({symbol!r}) unexpected status {resp.status_code}: {resp.text}")
            raise TransportError()

        try:
            data = resp.json()
        except ValueError:
            logger.exception(f"Failed to decode JSON for search({symbol!r})")
            raise TransportError()

        if isinstance(data, dict) and data.get("error"):
            payload = SearchErrorPayload(error=str(data["error"]))
            logger.info(f"search({symbol!r}) -> domain error: {payload.error!r}")
            raise DomainError(payload.error)

        try:
            snapshot = StockSnapshot.model_validate(data)
        except ValidationError as e:
            logger.error(f"search({symbol!r}): invalid payload: {e}")
            raise TransportError()

        logger.info(
            f"search({symbol!r}) -> {snapshot.company!r}, "
            f"{len(snapshot.historical_data)} historical points"
        )
        return snapshot
