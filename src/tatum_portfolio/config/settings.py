from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.logging import resolve_level


class AppSettings(BaseSettings):
    """應用程式環境設定。"""

    # 不在本地驗證，缺少時由上游回應 401
    tatum_api_key: str = Field("", alias="TATUM_API_KEY")
    tatum_base_url: HttpUrl = Field("https://api.tatum.io", alias="TATUM_BASE_URL")
    tatum_timeout: float = Field(30.0, gt=0, alias="TATUM_TIMEOUT")
    query_timeout: Optional[float] = Field(None, gt=0, alias="QUERY_TIMEOUT")

    ipfs_gateway: str = Field("https://ipfs.io/ipfs/", alias="IPFS_GATEWAY")

    api_host: str = Field("127.0.0.1", alias="API_HOST")
    api_port: int = Field(8000, ge=1, le=65535, alias="API_PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    @property
    def base_url(self) -> str:
        return str(self.tatum_base_url).rstrip("/")

    @field_validator("query_timeout", mode="before")
    @classmethod
    def _empty_query_timeout(cls, value: Optional[str | float]) -> Optional[float]:
        if value in (None, "", "null", "None"):
            return None
        if isinstance(value, str):
            return float(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        resolve_level(value)
        return value.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """載入並快取設定。"""

    return AppSettings()
