"""設定型定義と YAML 読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import PagedLoaderError, PagedLoaderErrorCodes


class AdapterConfig(BaseModel):
    """ページング表示設定。"""

    page_size: int = Field(default=10, ge=1)
    show_retry: bool = True


class HttpSourceConfig(BaseModel):
    """HTTP ページソース設定。"""

    base_url: str
    path: str = ""
    offset_param: str = "_start"
    limit_param: str = "_limit"
    items_field: str | None = None
    api_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class PagedLoaderConfig(BaseModel):
    """paged_loader 設定全体。"""

    paging: AdapterConfig = Field(default_factory=AdapterConfig)
    http: HttpSourceConfig | None = None


def load_config(path: Path) -> PagedLoaderConfig:
    """YAML 設定ファイルを読み込んで PagedLoaderConfig を返す。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PagedLoaderError(
            code=PagedLoaderErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise PagedLoaderError(
            code=PagedLoaderErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    try:
        return PagedLoaderConfig.model_validate(data)
    except ValidationError as e:
        raise PagedLoaderError(
            code=PagedLoaderErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
