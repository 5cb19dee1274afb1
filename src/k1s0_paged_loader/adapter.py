"""仮想リスト描画面とコントローラーの橋渡し"""

from __future__ import annotations

import asyncio
import logging
from typing import Generic

from .config import AdapterConfig
from .controller import PageLoadController
from .exceptions import PagedLoaderError, PagedLoaderErrorCodes
from .models import (
    ErrorBuilder,
    ItemBuilder,
    Listener,
    LoadingBuilder,
    NoItemsFoundBuilder,
    PageFetcher,
    R,
    RetryBuilder,
    StatusKind,
    StatusNode,
    T,
)

logger = logging.getLogger(__name__)


def _default_loading() -> StatusNode:
    return StatusNode(kind=StatusKind.LOADING)


def _default_error(error: BaseException) -> StatusNode:
    return StatusNode(kind=StatusKind.ERROR, error=error)


def _default_no_items_found() -> StatusNode:
    return StatusNode(kind=StatusKind.NO_ITEMS_FOUND)


class PagedViewAdapter(Generic[T, R]):
    """論理インデックスごとの描画要求をコントローラーへ中継するアダプター。

    描画面に報告する件数は常に「ロード済み件数 + 1」で、末尾の 1 行は
    ステータス行になる。ステータス行が描画されるたびに次ページの取得を
    試みるため、スクロールに応じて逐次ロードが進む。

    controller を渡した場合は外部所有として扱い、page_fetcher と page_size を
    渡した場合はアダプターが専用のコントローラーを生成して所有する。
    """

    def __init__(
        self,
        item_builder: ItemBuilder[T, R],
        *,
        controller: PageLoadController[T] | None = None,
        page_fetcher: PageFetcher[T] | None = None,
        page_size: int | None = None,
        show_retry: bool = True,
        loading_builder: LoadingBuilder[R] | None = None,
        error_builder: ErrorBuilder[R] | None = None,
        retry_builder: RetryBuilder[R] | None = None,
        no_items_found_builder: NoItemsFoundBuilder[R] | None = None,
        on_changed: Listener | None = None,
    ) -> None:
        if controller is not None and (page_fetcher is not None or page_size is not None):
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message="Cannot specify both controller and page_fetcher/page_size",
            )
        if show_retry and error_builder is not None:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message="Cannot specify error_builder when show_retry is enabled",
            )
        if not show_retry and retry_builder is not None:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message="Cannot specify retry_builder when show_retry is disabled",
            )

        if controller is not None:
            self._owns_controller = False
        elif page_fetcher is not None and page_size is not None:
            controller = PageLoadController(page_fetcher, page_size)
            self._owns_controller = True
        else:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message="Either controller or both page_fetcher and page_size must be specified",
            )
        self._controller = controller
        self._item_builder = item_builder
        self._show_retry = show_retry
        self._loading_builder = loading_builder
        self._error_builder = error_builder
        self._retry_builder = retry_builder
        self._no_items_found_builder = no_items_found_builder
        self._on_changed = on_changed
        self._subscription: int | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(
        cls,
        item_builder: ItemBuilder[T, R],
        page_fetcher: PageFetcher[T],
        config: AdapterConfig,
        **builders,
    ) -> PagedViewAdapter[T, R]:
        """AdapterConfig からコントローラー所有のアダプターを生成する。"""
        return cls(
            item_builder,
            page_fetcher=page_fetcher,
            page_size=config.page_size,
            show_retry=config.show_retry,
            **builders,
        )

    @property
    def controller(self) -> PageLoadController[T]:
        return self._controller

    @property
    def item_count(self) -> int:
        """描画面に報告する件数（ステータス行を含む）。"""
        return len(self._controller.loaded_items) + 1

    def attach(self) -> None:
        """on_changed をコントローラーの変更通知に登録する。"""
        if self._on_changed is None or self._subscription is not None:
            return
        self._subscription = self._controller.subscribe(self._on_changed)

    def close(self) -> None:
        """購読を解除し、実行中のフェッチタスクをキャンセルする。

        所有しているコントローラーは破棄する。
        """
        if self._subscription is not None:
            self._controller.unsubscribe(self._subscription)
            self._subscription = None
        for task in list(self._tasks):
            task.cancel()
        if self._owns_controller:
            self._controller.dispose()

    def build(self, index: int) -> R | StatusNode | None:
        """論理インデックス index の描画結果を返す。

        ステータス行の描画はフェッチタスクを発行するため、実行中の
        イベントループ上で呼び出す必要がある。

        Raises:
            PagedLoaderError: ループ外でフェッチを発行しようとした場合
        """
        controller = self._controller
        loaded = controller.loaded_items
        if 0 <= index < len(loaded):
            return self._item_builder(loaded[index], index)
        if index != len(loaded):
            return None
        return self._build_status_row()

    async def wait_idle(self) -> None:
        """発行済みのフェッチタスクがすべて完了するまで待つ。"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _build_status_row(self) -> R | StatusNode | None:
        controller = self._controller
        if controller.no_items_found:
            builder = self._no_items_found_builder or _default_no_items_found
            return builder()
        if controller.error is not None:
            if self._show_retry:
                if self._retry_builder is not None:
                    return self._retry_builder(controller.retry)
                return StatusNode(kind=StatusKind.RETRY, retry=controller.retry)
            error_builder = self._error_builder or _default_error
            return error_builder(controller.error)
        if controller.has_more_items:
            self._schedule_fetch()
            builder = self._loading_builder or _default_loading
            return builder()
        return None

    def _schedule_fetch(self) -> None:
        if self._controller.is_fetching:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.INVALID_CONFIG,
                message="build() must be called from a running event loop to fetch pages",
                cause=e,
            ) from e
        task = loop.create_task(self._controller.fetch_next_page())
        self._tasks.add(task)
        task.add_done_callback(self._on_fetch_done)

    def _on_fetch_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Page fetch task failed",
                extra={"error": str(exc)},
                exc_info=exc,
            )
