"""ページ単位の逐次ロード制御"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, Generic, overload

from .exceptions import InvalidPageSizeError, PagedLoaderError, PagedLoaderErrorCodes
from .models import LoadState, PageFetcher, T
from .notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class LoadedItemsView(Sequence, Generic[T]):
    """ロード済みアイテムの読み取り専用ビュー（コピーしない）。"""

    __slots__ = ("_items",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, items: list[T]) -> None:
        self._items = items

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index: int | slice) -> T | tuple[T, ...]:
        if isinstance(index, slice):
            return tuple(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Sequence) and not isinstance(other, str):
            return tuple(self._items) == tuple(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"LoadedItemsView({self._items!r})"


class PageLoadController(ChangeNotifier, Generic[T]):
    """ページを 1 ページずつ順番に取得して蓄積するコントローラー。

    同時に実行されるフェッチは常に 1 つだけで、ページ k+1 はページ k の
    フェッチ完了後にしか要求されない。状態を変更した操作の最後に
    リスナーへ 1 回だけ通知する。

    Args:
        page_fetcher: ページ番号を受け取りアイテム列を返す非同期関数
        page_size: 1 ページあたりの最大件数
    """

    def __init__(self, page_fetcher: PageFetcher[T], page_size: int) -> None:
        super().__init__()
        if page_size < 1:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message=f"page_size must be positive: {page_size}",
            )
        self._page_fetcher = page_fetcher
        self._page_size = page_size
        self._generation = 0
        self._loaded_items: list[T] = []
        self._loaded_view = LoadedItemsView(self._loaded_items)
        self._pages_loaded = 0
        self._has_more_items = True
        self._error: Exception | None = None
        self._in_flight = False

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def loaded_items(self) -> LoadedItemsView[T]:
        """ロード済みアイテムの読み取り専用ビュー。状態の変化に追従する。"""
        return self._loaded_view

    @property
    def pages_loaded(self) -> int:
        """成功したフェッチ数。次に要求するページ番号でもある。"""
        return self._pages_loaded

    @property
    def has_more_items(self) -> bool:
        return self._has_more_items

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def is_fetching(self) -> bool:
        return self._in_flight

    @property
    def generation(self) -> int:
        """reset のたびに増加する世代番号。"""
        return self._generation

    @property
    def no_items_found(self) -> bool:
        """最初のフェッチが空だった場合に True。

        pages_loaded は空でないページの成功数なので、remove_item で全件を
        削除しても True にはならない。
        """
        return self._pages_loaded == 0 and not self._has_more_items

    @property
    def state(self) -> LoadState:
        if self._in_flight:
            return LoadState.FETCHING
        if self._error is not None:
            return LoadState.ERRORED
        if not self._has_more_items:
            return LoadState.EXHAUSTED
        return LoadState.IDLE

    def reset(self) -> None:
        """全状態を初期値に戻す。実行中のフェッチ結果は破棄される。"""
        self._generation += 1
        self._loaded_items.clear()
        self._pages_loaded = 0
        self._has_more_items = True
        self._error = None
        self._in_flight = False
        self.notify()

    async def fetch_next_page(self) -> None:
        """次のページを取得する。

        フェッチ中またはデータ終端に達している場合は何もしない。
        フェッチ関数の例外は error に格納され、呼び出し元には送出しない。

        Raises:
            InvalidPageSizeError: フェッチ関数が page_size を超える件数を返した場合
        """
        if self._in_flight or not self._has_more_items:
            return

        self._in_flight = True
        generation = self._generation
        page_index = self._pages_loaded
        logger.debug(
            "Fetching page",
            extra={"page_index": page_index, "generation": generation},
        )

        try:
            page = await self._page_fetcher(page_index)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._in_flight = False
            raise
        except Exception as e:
            if generation != self._generation:
                self._discard_stale(page_index, generation)
                return
            logger.warning(
                "Failed to fetch page",
                extra={"page_index": page_index, "error": str(e)},
            )
            self._error = e
            self._in_flight = False
            self.notify()
            return

        if generation != self._generation:
            self._discard_stale(page_index, generation)
            return

        items = list(page) if page is not None else []
        if len(items) > self._page_size:
            self._in_flight = False
            self.notify()
            raise InvalidPageSizeError(
                page_index=page_index,
                page_size=self._page_size,
                actual_size=len(items),
            )

        if not items:
            self._has_more_items = False
        else:
            self._loaded_items.extend(items)
            self._pages_loaded += 1
        self._error = None
        self._in_flight = False
        logger.debug(
            "Fetched page",
            extra={"page_index": page_index, "item_count": len(items)},
        )
        self.notify()

    def retry(self) -> None:
        """エラーをクリアする。再フェッチは次の描画で行われる。"""
        self._error = None
        self.notify()

    def remove_item(self, predicate: Callable[[T], bool]) -> int:
        """predicate に一致するロード済みアイテムを削除し、削除件数を返す。"""
        kept = [item for item in self._loaded_items if not predicate(item)]
        removed = len(self._loaded_items) - len(kept)
        self._loaded_items[:] = kept
        self.notify()
        return removed

    def _discard_stale(self, page_index: int, generation: int) -> None:
        logger.debug(
            "Discarding stale page result",
            extra={
                "page_index": page_index,
                "generation": generation,
                "current_generation": self._generation,
            },
        )
