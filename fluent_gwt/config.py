"""Load fluent-gwt settings from a YAML file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from fluent_gwt.engine.policy import FluentPolicy

CONFIG_FILENAME = "fluent-gwt.yaml"
DEFAULT_RECORD_DB = ".fluent-gwt/records.db"

_POLICY_KEYS = frozenset({"dedup", "priming", "cache_assertions", "repeatable_then"})
_TOP_LEVEL_KEYS = frozenset({"policy", "record_db"})


@dataclass
class Settings:
    policy: FluentPolicy = field(default_factory=FluentPolicy)
    record_db: Path | None = None  # None = records are not persisted


def _normalize_key(key) -> str:
    # cache-assertions and cache_assertions are the same key
    return str(key).replace("-", "_")


def _normalize(obj):
    if isinstance(obj, dict):
        return {_normalize_key(k): _normalize(v) for k, v in obj.items()}
    return obj


def parse_settings(content: str, base_dir: str | Path = ".") -> Settings:
    raw = yaml.safe_load(content)
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError("Invalid config: expected a mapping")

    normalized = _normalize(raw)
    unknown = sorted(set(normalized) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    policy_raw = normalized.get("policy") or {}
    if not isinstance(policy_raw, dict):
        raise ValueError('Invalid config: "policy" must be a mapping')
    unknown = sorted(set(policy_raw) - _POLICY_KEYS)
    if unknown:
        raise ValueError(f"Unknown policy keys: {', '.join(unknown)}")
    for flag in ("cache_assertions", "repeatable_then"):
        if flag in policy_raw and not isinstance(policy_raw[flag], bool):
            raise ValueError(f'Invalid policy: "{flag}" must be true or false')

    policy = FluentPolicy(**policy_raw)

    record_db = normalized.get("record_db")
    if record_db is not None:
        if not isinstance(record_db, str) or not record_db.strip():
            raise ValueError('Invalid config: "record_db" must be a path')
        record_db = Path(base_dir) / record_db

    return Settings(policy=policy, record_db=record_db)


def load_settings(path: str | Path | None = None, cwd: str | Path = ".") -> Settings:
    """Read settings from ``path``, or from fluent-gwt.yaml in ``cwd`` when present."""
    config_path = Path(path) if path else Path(cwd) / CONFIG_FILENAME
    if not config_path.exists():
        if path:
            raise ValueError(f"Config file not found: {config_path}")
        return Settings()
    return parse_settings(config_path.read_text(encoding="utf-8"), base_dir=config_path.parent)
