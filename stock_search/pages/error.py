from nicegui import ui
from fastapi import Request

import logging

from stock_search.static.style import add_style

logger = logging.getLogger(__name__)

ERROR_TITLES = {
    404: 'Page not found',
    502: 'The stock service is unavailable',
}


def error_title(status_code: int) -> str:
    return ERROR_TITLES.get(status_code, 'Something went wrong')


def error_page(status_code: int, message: str):
    """
    Render a centered error card with the status, a message and a link back to the search.

    Args:
        status_code: HTTP status shown on the card.
        message: Detail shown under the title.
    """
    logger.info(f"error_page: status={status_code}, message={message!r}")
    add_style()
    with ui.element('div').classes('container text-center'):
        with ui.column().classes('items-center w-full gap-2'):
            ui.icon('error_outline', size='64px', color='negative')
            ui.chip(str(status_code)).props('color=negative text-color=white dense')
            ui.label(error_title(status_code)).classes('text-h5 text-bold')
            ui.label(message).classes('error')
            ui.button('Back to search', icon='search', on_click=lambda: ui.navigate.to('/')) \
                .props('unelevated color=primary') \
                .classes('q-mt-md')


@ui.page('/error')
def dynamic_error_page(request: Request):
    code = int(request.query_params.get('status', 500))
    message = request.query_params.get('message', 'Internal Server Error')

    error_page(code, message)
