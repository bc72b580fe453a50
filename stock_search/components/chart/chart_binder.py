from nicegui import ui
from typing import Any, Iterable, Optional, Protocol
import logging

from stock_search.components.chart.chart_draw import ChartsDrawMixin, sort_price_points
from stock_search.exceptions import SurfaceUnavailable
from stock_search.schemas.stock import PricePoint

logger = logging.getLogger(__name__)

CHART_SURFACE_MARKER = "stockChart"


class ChartHandle(Protocol):
    def release(self) -> None: ...


class ChartEngine(Protocol):
    def instantiate(self, options: dict, surface: Any) -> ChartHandle: ...


class EChartHandle:
    """A live `ui.echart` element; `release` removes it from its surface."""

    def __init__(self, chart: ui.echart) -> None:
        self.chart = chart
        self.released = False

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        if not self.chart.is_deleted:
            self.chart.delete()
        logger.debug(f"EChartHandle.release: chart c{self.chart.id} released")


class EChartEngine:
    """Creates ECharts widgets inside a NiceGUI element."""

    def __init__(self, height_px: int = 420) -> None:
        self.height_px = height_px

    def instantiate(self, options: dict, surface: Any) -> EChartHandle:
        with surface:
            chart = ui.echart(options).classes("w-full").style(f"height: {self.height_px}px;")
        logger.debug(f"EChartEngine.instantiate: chart c{chart.id} created")
        return EChartHandle(chart)


def surface_is_mounted(surface: Any) -> bool:
    return surface is not None and not getattr(surface, "is_deleted", False)


class ChartBinder(ChartsDrawMixin):
    """
    Owns the one chart instance drawn on the price history surface.

    At most one handle is alive at any time; the previous handle is released
    before a new one is created.
    """

    def __init__(self, engine: Optional[ChartEngine] = None) -> None:
        self.engine: ChartEngine = engine if engine is not None else EChartEngine()
        self._handle: Optional[ChartHandle] = None

    @property
    def handle(self) -> Optional[ChartHandle]:
        return self._handle

    def render(self, series: Iterable[PricePoint], surface: Any) -> ChartHandle:
        """
        Draw `series` as a filled line chart on `surface`, replacing any previous chart.

        The current chart is left untouched if the surface is missing or the
        series contains a malformed date.

        Args:
            series: Price points in any order.
            surface: Mounted NiceGUI element that hosts the chart.

        Returns:
            The new chart handle.

        Raises:
            SurfaceUnavailable: `surface` is None or has been deleted.
            MalformedDataPoint: a point has an unparseable date.
        """
        if not surface_is_mounted(surface):
            logger.warning("ChartBinder.render: chart surface is not mounted")
            raise SurfaceUnavailable()

        points = sort_price_points(series)
        options = self.build_price_line_options(points)

        self.dispose()
        self._handle = self.engine.instantiate(options, surface)
        logger.info(f"ChartBinder.render: chart bound with {len(points)} points")
        return self._handle

    def dispose(self) -> None:
        """Release the current chart, if any. Safe to call repeatedly."""
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.release()
            logger.debug("ChartBinder.dispose: previous chart released")
