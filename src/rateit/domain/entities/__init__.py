from .cancellation import CancelToken
from .movie import (
    CatalogCancelled,
    CatalogError,
    CatalogNotFound,
    CatalogTransportError,
    MovieDetail,
    RatingOutOfRange,
    SearchPage,
    SearchResult,
    WatchedEntry,
    WatchedSummary,
)
from .request_state import (
    IDLE,
    Failure,
    FailureKind,
    Idle,
    Loading,
    RequestState,
    Success,
)

__all__ = [
    "IDLE",
    "CancelToken",
    "CatalogCancelled",
    "CatalogError",
    "CatalogNotFound",
    "CatalogTransportError",
    "Failure",
    "FailureKind",
    "Idle",
    "Loading",
    "MovieDetail",
    "RatingOutOfRange",
    "RequestState",
    "SearchPage",
    "SearchResult",
    "Success",
    "WatchedEntry",
    "WatchedSummary",
]
