from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
import logging

from stock_search.schemas.stock import StockSnapshot

logger = logging.getLogger(__name__)


class RequestStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


class SearchState(BaseModel):
    """
    Immutable snapshot of the search widget.

    `generation` is the tag of the request that produced this state; transitions
    for any other generation are rejected, so a late completion can never
    overwrite the state of a newer submit.
    """
    model_config = ConfigDict(frozen=True)

    status: RequestStatus = RequestStatus.IDLE
    query: str = ""
    generation: int = 0
    snapshot: Optional[StockSnapshot] = None
    error: str = ""

    @property
    def loading(self) -> bool:
        return self.status is RequestStatus.LOADING

    @property
    def show_header(self) -> bool:
        return self.status is RequestStatus.SUCCESS and self.snapshot is not None

    @property
    def show_error(self) -> bool:
        return self.status is RequestStatus.FAILURE and bool(self.error)


IDLE_STATE = SearchState()


def begin(state: SearchState, query: str, generation: int) -> SearchState:
    """Enter Loading for a new request; clears the previous error and snapshot."""
    if generation <= state.generation:
        raise ValueError(f"generation must increase: {generation} <= {state.generation}")
    return SearchState(status=RequestStatus.LOADING, query=query, generation=generation)


def is_current(state: SearchState, generation: int) -> bool:
    return state.generation == generation


def succeed(state: SearchState, generation: int, snapshot: StockSnapshot) -> SearchState:
    """Loading -> Success(snapshot). Stale or out-of-order calls return `state` unchanged."""
    if not is_current(state, generation) or not state.loading:
        logger.debug(f"succeed: ignored for generation={generation}, state={state.status.value}@{state.generation}")
        return state
    return state.model_copy(update={"status": RequestStatus.SUCCESS, "snapshot": snapshot, "error": ""})


def fail(state: SearchState, generation: int, message: str) -> SearchState:
    """Loading -> Failure(message). Stale or out-of-order calls return `state` unchanged."""
    if not is_current(state, generation) or not state.loading:
        logger.debug(f"fail: ignored for generation={generation}, state={state.status.value}@{state.generation}")
        return state
    return state.model_copy(update={"status": RequestStatus.FAILURE, "snapshot": None, "error": message})


def settle(state: SearchState, generation: int) -> SearchState:
    """
    Clear the loading flag for `generation` if no outcome was recorded.

    Used as the final step of every request; a request that ended without
    success or failure (e.g. cancelled) returns to Idle.
    """
    if not is_current(state, generation) or not state.loading:
        return state
    return state.model_copy(update={"status": RequestStatus.IDLE})
