"""Immutable dashboard state and the events that advance it.

The window never mutates state in place. Each user action or worker result
is turned into an event and passed to ``reduce``, which returns a new
``ViewState`` snapshot. Results carry the request id they were started with;
``reduce`` drops any result whose id is not the request currently pending, so
an old response can never overwrite a newer selection.
"""

import logging
from dataclasses import dataclass, replace

from dpipmon.models import DisplayPoint, Sample, SummaryStats, Target, TimeRange
from dpipmon.stats import summarize
from dpipmon.timeline import reindex

logger = logging.getLogger(__name__)

ISP_LIST_ERROR = "Cannot retrieve ISP list"
NETWORK_DATA_ERROR = "Cannot retrieve network data"


@dataclass(frozen=True)
class ViewState:
    """Everything the window renders, as one snapshot."""

    isp_list: tuple[str, ...] = ()
    selected_isp: str = ""
    selected_range: TimeRange = TimeRange.HOUR_24
    samples: tuple[Sample, ...] = ()
    now_ms: int | None = None
    last_updated_ms: int | None = None
    error: str = ""
    auto_refresh: bool = True
    request_id: int = 0  # newest series request issued; 0 before any
    pending_request_id: int | None = None  # request whose result is still wanted
    legacy_response: bool = False

    @property
    def loading(self) -> bool:
        return self.pending_request_id is not None

    @property
    def isp_selector_enabled(self) -> bool:
        return not self.loading and len(self.isp_list) > 0

    @property
    def range_selector_enabled(self) -> bool:
        return not self.loading and bool(self.selected_isp)

    @property
    def has_samples(self) -> bool:
        return len(self.samples) > 0

    @property
    def should_auto_refresh(self) -> bool:
        return self.auto_refresh and bool(self.selected_isp)


# Events


@dataclass(frozen=True)
class IspListLoaded:
    isps: tuple[str, ...]


@dataclass(frozen=True)
class IspListFailed:
    reason: str = ""


@dataclass(frozen=True)
class SelectionChanged:
    """User picked a new ISP and/or range. None leaves that field as is."""

    isp: str | None = None
    range_minutes: TimeRange | None = None


@dataclass(frozen=True)
class AutoRefreshToggled:
    enabled: bool


@dataclass(frozen=True)
class FetchStarted:
    """A series request was issued (selection change, manual, or timer)."""

    request_id: int


@dataclass(frozen=True)
class FetchSucceeded:
    request_id: int
    samples: tuple[Sample, ...]
    now_ms: int
    legacy: bool = False


@dataclass(frozen=True)
class FetchFailed:
    request_id: int
    reason: str = ""


def reduce(state: ViewState, event) -> ViewState:
    """Return the state that follows ``state`` after ``event``."""
    if isinstance(event, IspListLoaded):
        return replace(state, isp_list=tuple(event.isps))

    if isinstance(event, IspListFailed):
        return replace(state, isp_list=(), error=ISP_LIST_ERROR)

    if isinstance(event, SelectionChanged):
        isp = state.selected_isp if event.isp is None else event.isp
        range_minutes = state.selected_range if event.range_minutes is None else event.range_minutes
        if isp == state.selected_isp and range_minutes == state.selected_range:
            return state
        # Samples and any in-flight request belong to the previous selection
        return replace(
            state,
            selected_isp=isp,
            selected_range=TimeRange(range_minutes),
            samples=(),
            now_ms=None,
            pending_request_id=None,
            legacy_response=False,
            error="",
        )

    if isinstance(event, AutoRefreshToggled):
        return replace(state, auto_refresh=event.enabled)

    if isinstance(event, FetchStarted):
        if event.request_id <= state.request_id:
            logger.debug(
                "Ignoring out-of-order fetch start: request_id=%d (current=%d)",
                event.request_id,
                state.request_id,
            )
            return state
        return replace(
            state,
            request_id=event.request_id,
            pending_request_id=event.request_id,
            error="",
        )

    if isinstance(event, (FetchSucceeded, FetchFailed)):
        if event.request_id != state.pending_request_id:
            logger.debug(
                "Ignoring stale response: request_id=%d (pending=%s)",
                event.request_id,
                state.pending_request_id,
            )
            return state

        if isinstance(event, FetchFailed):
            return replace(
                state,
                pending_request_id=None,
                samples=(),
                now_ms=None,
                legacy_response=False,
                error=NETWORK_DATA_ERROR,
            )

        return replace(
            state,
            pending_request_id=None,
            samples=tuple(event.samples),
            now_ms=event.now_ms,
            last_updated_ms=event.now_ms,
            legacy_response=event.legacy,
        )

    raise TypeError(f"Unknown event: {event!r}")


def display_points(state: ViewState, target: Target) -> list[DisplayPoint]:
    """Chart points for one target, or an empty list before the first response."""
    if state.now_ms is None:
        return []
    return reindex(state.samples, state.selected_range, state.now_ms, target)


def summary(state: ViewState, target: Target) -> SummaryStats | None:
    return summarize(state.samples, target)
