"""インメモリ PageSource（テスト用）"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from .exceptions import PagedLoaderError, PagedLoaderErrorCodes
from .models import T
from .source import PageSource


class InMemoryPageSource(PageSource[T]):
    """リストをページ単位で切り出して返すテスト用ソース。

    fail_pages に含まれるページ番号は、最初の要求時に 1 回だけ
    FETCH_FAILED で失敗する。
    """

    def __init__(
        self,
        items: Iterable[T],
        page_size: int,
        fail_pages: Iterable[int] = (),
        delay_seconds: float = 0.0,
    ) -> None:
        self._items = list(items)
        self._page_size = page_size
        self._fail_pages = set(fail_pages)
        self._delay_seconds = delay_seconds
        self.requested_pages: list[int] = []

    async def fetch_page(self, page_index: int) -> list[T]:
        self.requested_pages.append(page_index)
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        if page_index in self._fail_pages:
            self._fail_pages.discard(page_index)
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.FETCH_FAILED,
                message=f"page {page_index} is unavailable",
            )
        start = page_index * self._page_size
        return self._items[start : start + self._page_size]
