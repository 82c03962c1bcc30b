from .search_coordinator import SearchCoordinator, SearchState
from .selection_controller import SelectionController, SelectionState
from .watched_list import WatchedListStore

__all__ = [
    "SearchCoordinator",
    "SearchState",
    "SelectionController",
    "SelectionState",
    "WatchedListStore",
]
