from typing import Iterable, List
import logging

from stock_search.schemas.stock import PricePoint

logger = logging.getLogger(__name__)

LINE_COLOR = "#2196F3"
AREA_COLOR = "rgba(33, 150, 243, 0.1)"
LINE_SMOOTHING = 0.4


def sort_price_points(series: Iterable[PricePoint]) -> List[PricePoint]:
    """
    Return a new list of points ordered ascending by parsed date.

    The sort is stable: points sharing a date keep their input order.
    The input is never mutated.

    Raises:
        MalformedDataPoint: if any point has an unparseable date.
    """
    points = list(series)
    keyed = [(p.date_value(), p) for p in points]
    keyed.sort(key=lambda kv: kv[0])
    return [p for _, p in keyed]


class ChartsDrawMixin:

    def build_price_line_options(
        self,
        points: List[PricePoint],
        title: str = "Historical Stock Price",
        series_name: str = "Stock Price",
    ) -> dict:
        """
        Build ECharts line chart options (option dict) for a single price history.

        Expects `points` already in chronological order (see `sort_price_points`).

        Args:
            points: Ordered price points; dates become x labels, prices y values.
            title: Chart title (displayed at the top).
            series_name: Legend/tooltip name of the only series.

        Returns:
            ECharts options dict ready to be passed into `ui.echart`.
        """
        xs: list[str] = [p.date for p in points]
        ys: list[float] = [p.price for p in points]

        logger.debug(f"build_price_line_options: {len(xs)} points, title={title!r}")

        return {
            "title": {"text": title, "left": "center"},
            "tooltip": {"trigger": "axis"},
            "grid": {
                "left": 40,
                "right": 25,
                "top": 50,
                "bottom": 35,
                "containLabel": True,
            },
            "xAxis": {"type": "category", "data": xs, "boundaryGap": False},
            "yAxis": {"type": "value", "scale": True},
            "series": [
                {
                    "name": series_name,
                    "type": "line",
                    "data": ys,
                    "smooth": LINE_SMOOTHING,
                    "showSymbol": True,
                    "lineStyle": {"color": LINE_COLOR},
                    "itemStyle": {"color": LINE_COLOR},
                    "areaStyle": {"color": AREA_COLOR},
                }
            ],
        }
