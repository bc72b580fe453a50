from pythonjsonlogger.json import JsonFormatter
import logging
import os
import httpx
from fastapi import Request
from fastapi.responses import Response

import stock_search.pages.market
import stock_search.pages.error

from stock_search.exceptions import StockSearchError
from stock_search.config import settings

from nicegui import ui, app
from nicegui.client import Client
from nicegui.page import page

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__)))

LOG_FORMAT = (
    '%(levelname)s %(name)-12s %(asctime)s %(module)s %(process)d %(thread)d %(message)s'
)

logger = logging.getLogger()


def configure_logging(log_dir: str = settings.LOG_DIR, level: str = settings.LOG_LEVEL) -> logging.Handler:
    """
    Send all records of the root logger to `<log_dir>/ui.json` as JSON lines.

    A relative `log_dir` is resolved against the package directory.
    Existing root handlers are replaced.
    """
    if not os.path.isabs(log_dir):
        log_dir = os.path.join(ROOT_DIR, log_dir)
    os.makedirs(log_dir, exist_ok=True)

    log_handler = logging.FileHandler(os.path.join(log_dir, 'ui.json'), encoding='utf-8')
    log_handler.setFormatter(JsonFormatter(LOG_FORMAT))

    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(log_handler)
    logger.setLevel(level)
    return log_handler


async def startup_httpx():
    app.state.search_httpx = httpx.AsyncClient(
        base_url=settings.SEARCH_API_URL.rstrip('/'),
        timeout=httpx.Timeout(
            connect=settings.HTTP_CONNECT_TIMEOUT,
            read=settings.HTTP_READ_TIMEOUT,
            write=5.0,
            pool=5.0,
        ),
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=100),
        headers={'User-Agent': 'stock-search-ui/1.0'},
    )


async def shutdown_httpx():
    await app.state.search_httpx.aclose()


app.on_startup(startup_httpx)
app.on_shutdown(shutdown_httpx)


@app.exception_handler(Exception)
async def _exception_handler(request: Request, exception: Exception) -> Response:
    logger.info(f"exception_handler: {exception}/{type(exception)}")
    status = 502 if isinstance(exception, StockSearchError) else 500
    with Client(page(''), request=request) as client:
        stock_search.pages.error.error_page(status, str(exception))
    return client.build_response(request, status)


@app.on_page_exception
def handle_page_error(exception: Exception) -> None:
    logger.exception(f'Unhandled page exception: {type(exception)}',
                     exc_info=(type(exception), exception, exception.__traceback__))


def run() -> None:
    configure_logging()
    ui.run(
        host=settings.UI_HOST,
        port=settings.UI_PORT,
        title="Stock Analysis",
        storage_secret=settings.SECRET_KEY or None,
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    run()
