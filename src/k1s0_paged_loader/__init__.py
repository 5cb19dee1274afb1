"""k1s0 paged loader library."""

from .adapter import PagedViewAdapter
from .config import AdapterConfig, HttpSourceConfig, PagedLoaderConfig, load_config
from .controller import LoadedItemsView, PageLoadController
from .exceptions import InvalidPageSizeError, PagedLoaderError, PagedLoaderErrorCodes
from .http_source import HttpPageSource
from .memory import InMemoryPageSource
from .models import LoadState, PageFetcher, StatusKind, StatusNode
from .notifier import ChangeNotifier
from .source import PageSource

__all__ = [
    "AdapterConfig",
    "ChangeNotifier",
    "HttpPageSource",
    "HttpSourceConfig",
    "InMemoryPageSource",
    "InvalidPageSizeError",
    "LoadState",
    "LoadedItemsView",
    "PageFetcher",
    "PageLoadController",
    "PageSource",
    "PagedLoaderConfig",
    "PagedLoaderError",
    "PagedLoaderErrorCodes",
    "PagedViewAdapter",
    "StatusKind",
    "StatusNode",
    "load_config",
]
