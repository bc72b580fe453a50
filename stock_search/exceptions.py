class StockSearchError(Exception):
    """Base class for errors surfaced in the search message slot."""
    def __init__(self, message="Stock search failed"):
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class DomainError(StockSearchError):
    """Raised when the backend understood the query but reports a problem (e.g. unknown symbol)."""
    def __init__(self, message="Unknown symbol"):
        super().__init__(message)


class TransportError(StockSearchError):
    """Raised when no usable response was obtained (timeout, connection error, bad body)."""
    def __init__(self, message="Error fetching stock data"):
        super().__init__(message)


class SurfaceUnavailable(StockSearchError):
    """Raised when the chart drawing region is not mounted."""
    def __init__(self, message="Chart surface is not available"):
        super().__init__(message)


class MalformedDataPoint(StockSearchError):
    """Raised when a historical price point carries an unparseable date."""
    def __init__(self, message="Malformed historical data point"):
        super().__init__(message)
