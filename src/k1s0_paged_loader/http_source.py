"""HTTP PageSource 実装"""

from __future__ import annotations

from typing import Any

import httpx

from .config import HttpSourceConfig
from .exceptions import PagedLoaderError, PagedLoaderErrorCodes
from .source import PageSource


class HttpPageSource(PageSource[dict[str, Any]]):
    """httpx を使った offset/limit 形式の HTTP ページソース。

    ページ k は offset = k * page_size, limit = page_size で要求する。
    """

    def __init__(self, config: HttpSourceConfig, page_size: int) -> None:
        self._config = config
        self._page_size = page_size
        headers: dict[str, str] = {"Accept": "application/json"}
        if config.api_key:
            headers["X-API-Key"] = config.api_key
        self._headers = headers

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=self._headers,
            timeout=self._config.timeout_seconds,
        )

    def _handle_error(self, resp: httpx.Response, page_index: int) -> None:
        if resp.status_code >= 400:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.HTTP_ERROR,
                message=f"fetch_page({page_index}): HTTP {resp.status_code}: {resp.text}",
            )

    def _extract_items(self, data: Any, page_index: int) -> list[dict[str, Any]]:
        if self._config.items_field is not None:
            if not isinstance(data, dict):
                raise PagedLoaderError(
                    code=PagedLoaderErrorCodes.DECODE_ERROR,
                    message=f"fetch_page({page_index}): expected a JSON object",
                )
            data = data.get(self._config.items_field, [])
        if not isinstance(data, list):
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.DECODE_ERROR,
                message=f"fetch_page({page_index}): expected a JSON array of items",
            )
        return data

    async def fetch_page(self, page_index: int) -> list[dict[str, Any]]:
        params = {
            self._config.offset_param: page_index * self._page_size,
            self._config.limit_param: self._page_size,
        }
        try:
            async with self._make_client() as client:
                resp = await client.get(self._config.path, params=params)
            self._handle_error(resp, page_index)
            data: Any = resp.json()
        except PagedLoaderError:
            raise
        except ValueError as e:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.DECODE_ERROR,
                message=f"Failed to decode page {page_index}: {e}",
                cause=e,
            ) from e
        except Exception as e:
            raise PagedLoaderError(
                code=PagedLoaderErrorCodes.HTTP_ERROR,
                message=f"Failed to fetch page {page_index}: {e}",
                cause=e,
            ) from e
        return self._extract_items(data, page_index)
