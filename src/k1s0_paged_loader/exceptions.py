"""paged_loader ライブラリの例外型定義"""

from __future__ import annotations


class PagedLoaderError(Exception):
    """paged_loader ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class PagedLoaderErrorCodes:
    """PagedLoaderError のエラーコード定数。"""

    INVALID_PAGE_SIZE: str = "INVALID_PAGE_SIZE"
    INVALID_CONFIG: str = "INVALID_CONFIG"
    FETCH_FAILED: str = "FETCH_FAILED"
    HTTP_ERROR: str = "HTTP_ERROR"
    DECODE_ERROR: str = "DECODE_ERROR"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class InvalidPageSizeError(PagedLoaderError):
    """ページ取得関数が page_size を超える件数を返した場合のエラー。"""

    def __init__(self, page_index: int, page_size: int, actual_size: int) -> None:
        super().__init__(
            code=PagedLoaderErrorCodes.INVALID_PAGE_SIZE,
            message=(
                f"page {page_index} returned {actual_size} items "
                f"(maximum is {page_size})"
            ),
        )
        self.page_index = page_index
        self.page_size = page_size
        self.actual_size = actual_size
