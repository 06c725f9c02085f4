from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError


@dataclass(frozen=True)
class DestinationConfig:
    """
    Static configuration of a destination.

    table_name and key_column_name are defaults; a record may override the
    table through its metadata, and a single-field key names its own column.
    """
    url: str = ""
    table_name: str = ""
    key_column_name: str = ""
    # DB-API paramstyle override; derived from the engine when unset
    placeholder: Optional[str] = None

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, str]) -> "DestinationConfig":
        """Build a config from the connector settings mapping."""
        return cls(
            url=cfg.get("url", ""),
            table_name=cfg.get("table", ""),
            key_column_name=cfg.get("keyColumnName", ""),
            placeholder=cfg.get("placeholder") or None,
        )

    def __post_init__(self) -> None:
        for name in ("url", "table_name", "key_column_name"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a string")


@dataclass
class QueueConfig:
    stream_key: str
    consumer_group: str
    consumer_name: str
    claim_idle_ms: int = 60_000
    block_ms: int = 5_000
    max_read_count: int = 1

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.block_ms <= 0:
            raise ValueError(
                "block_ms must be > 0; Redis interprets 0 as infinite blocking"
            )
