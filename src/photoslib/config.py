from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from photoslib.paths import config_root, default_library_path
from photoslib.query import DEFAULT_BATCH_SIZE


@dataclass(slots=True)
class StreamConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    skip_errors: bool = False


@dataclass(slots=True)
class UIConfig:
    show_summary: bool = True


@dataclass(slots=True)
class AppConfig:
    library_path: Path = field(default_factory=default_library_path)
    stream: StreamConfig = field(default_factory=StreamConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _to_config(data: dict[str, Any]) -> AppConfig:
    stream = StreamConfig(**data.get("stream", {}))
    ui = UIConfig(**data.get("ui", {}))
    if stream.batch_size < 1:
        raise ValueError(f"stream.batch_size must be >= 1, got {stream.batch_size}")
    return AppConfig(
        library_path=Path(data.get("library_path", str(default_library_path()))).expanduser(),
        stream=stream,
        ui=ui,
    )


def default_config_path() -> Path:
    return config_root() / "config.yaml"


def load_config(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> AppConfig:
    path = config_path or default_config_path()
    base: dict[str, Any] = {}
    if path.exists():
        loaded = yaml.safe_load(path.read_text())
        if isinstance(loaded, dict):
            base = loaded
    if overrides:
        base = _merge(base, overrides)
    return _to_config(base)


def write_default_config(path: Path | None = None) -> Path:
    target = path or default_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.exists():
        return target
    target.write_text(
        yaml.safe_dump(
            {
                "library_path": str(default_library_path()),
                "stream": {
                    "batch_size": DEFAULT_BATCH_SIZE,
                    "skip_errors": False,
                },
                "ui": {"show_summary": True},
            },
            sort_keys=False,
        )
    )
    return target
