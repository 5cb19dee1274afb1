"""PageSource 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic

from .models import T


class PageSource(ABC, Generic[T]):
    """ページ単位でアイテムを返すデータソース。

    インスタンスは呼び出し可能で、PageLoadController の page_fetcher として
    そのまま渡せる。
    """

    @abstractmethod
    async def fetch_page(self, page_index: int) -> list[T]:
        """指定ページ (0 始まり) のアイテムを取得する。"""
        ...

    async def __call__(self, page_index: int) -> list[T]:
        return await self.fetch_page(page_index)
