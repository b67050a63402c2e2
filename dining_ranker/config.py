from __future__ import annotations

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


ENV_PREFIX = "DINING_RANKER_"


class RankerSettings(BaseModel):
    # Orchestration
    batch_size: int = Field(default=20, ge=1)
    max_concurrent_batches: int = Field(default=5, ge=1)
    metrics_history_size: int = Field(default=50, ge=1)

    # Caches
    attributes_ttl_seconds: float = Field(default=3600, gt=0)
    attributes_max_entries: int = Field(default=1000, ge=1)
    scores_ttl_seconds: float = Field(default=1800, gt=0)
    scores_max_entries: int = Field(default=500, ge=1)
    batch_ttl_seconds: float = Field(default=300, gt=0)
    batch_max_entries: int = Field(default=50, ge=1)

    # Attribute store (in-memory when no URL is set)
    attribute_store_url: Optional[str] = Field(default=None)
    attribute_store_timeout: float = Field(default=10.0, gt=0)

    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None, load_env_file: bool = True) -> "RankerSettings":
        """Build settings from DINING_RANKER_* variables; non-None overrides win."""
        if load_env_file:
            load_dotenv()

        raw: dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None and value != "":
                raw[name] = value

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def log_summary(self) -> str:
        return (
            "batch_size=%s max_concurrent_batches=%s store=%s ttl(attr/score/batch)=%s/%s/%s"
            % (
                self.batch_size,
                self.max_concurrent_batches,
                self.attribute_store_url or "memory",
                self.attributes_ttl_seconds,
                self.scores_ttl_seconds,
                self.batch_ttl_seconds,
            )
        )
