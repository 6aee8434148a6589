from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SelectionStrategy = Literal["linear_scan", "heap"]


def normalize_selection_strategy(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_")
    return value


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping config out of code for easy extension."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    out_dir: str = Field(default="out", alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # JSONL sink for search events; empty keeps logging on stderr only.
    # Relative paths resolve under OUT_DIR.
    route_log_file: str = Field(default="", alias="ROUTE_LOG_FILE")

    # Vertex selection for Dijkstra: O(V) scan per step, or a binary heap.
    route_selection_strategy: SelectionStrategy = Field(
        default="linear_scan",
        alias="ROUTE_SELECTION_STRATEGY",
    )
    # 0 disables the deadline check at the selection step.
    route_search_deadline_s: float = Field(default=0.0, ge=0.0, alias="ROUTE_SEARCH_DEADLINE_S")
    route_log_searches: bool = Field(default=True, alias="ROUTE_LOG_SEARCHES")

    @field_validator("route_selection_strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, value: object) -> object:
        return normalize_selection_strategy(value)


settings = Settings()
