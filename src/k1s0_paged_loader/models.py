"""ページロードの型定義"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


class LoadState(StrEnum):
    """PageLoadController の状態。"""

    IDLE = "IDLE"
    FETCHING = "FETCHING"
    ERRORED = "ERRORED"
    EXHAUSTED = "EXHAUSTED"


class StatusKind(StrEnum):
    """ステータス行の種類。"""

    LOADING = "LOADING"
    ERROR = "ERROR"
    RETRY = "RETRY"
    NO_ITEMS_FOUND = "NO_ITEMS_FOUND"


RetryCallback = Callable[[], None]
Listener = Callable[[], None]

# ページ番号 (0 始まり) を受け取り、最大 page_size 件のアイテムを返す非同期関数。
# None は空ページとして扱う。
PageFetcher = Callable[[int], Awaitable[Sequence[T] | None]]

ItemBuilder = Callable[[T, int], R]
LoadingBuilder = Callable[[], R]
ErrorBuilder = Callable[[BaseException], R]
RetryBuilder = Callable[[RetryCallback], R]
NoItemsFoundBuilder = Callable[[], R]


@dataclass(frozen=True)
class StatusNode:
    """デフォルトのステータス行ビルダーが返す値。"""

    kind: StatusKind
    error: BaseException | None = None
    retry: RetryCallback | None = None
