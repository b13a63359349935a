"""
Configuration settings for shardsearch.

Uses Pydantic Settings to load environment variables for the process group
(worker count, result artifact path), the wire protocol (frame bounds,
receive timeout) and logging. CLI options override these per run.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MalformedPolicy = Literal["skip", "strict"]


class Settings(BaseSettings):
    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Process group
    workers: int = Field(4, alias="SEARCH_WORKERS")
    start_method: str = Field("spawn", alias="SEARCH_START_METHOD")
    join_timeout_seconds: float = Field(30.0, alias="SEARCH_JOIN_TIMEOUT")
    output_path: str = Field("output.txt", alias="SEARCH_OUTPUT_PATH")

    # Wire protocol
    max_frame_bytes: int = Field(64 * 1024 * 1024, alias="SEARCH_MAX_FRAME_BYTES")
    receive_timeout_seconds: Optional[float] = Field(None, alias="SEARCH_RECEIVE_TIMEOUT")
    malformed_policy: MalformedPolicy = Field("skip", alias="SEARCH_MALFORMED_POLICY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["MalformedPolicy", "Settings", "get_settings"]
