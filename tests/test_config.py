from pathlib import Path

import pytest
import yaml

from photoslib.config import AppConfig, load_config, write_default_config


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.yaml")
    assert isinstance(cfg, AppConfig)
    assert cfg.stream.batch_size == 256
    assert cfg.stream.skip_errors is False
    assert cfg.library_path.name == "Photos Library.photoslibrary"


def test_file_and_overrides_are_merged(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "library_path": "~/Pictures/Other.photoslibrary",
                "stream": {"batch_size": 32, "skip_errors": True},
            }
        )
    )
    cfg = load_config(path, overrides={"stream": {"skip_errors": False}})
    assert cfg.library_path == Path("~/Pictures/Other.photoslibrary").expanduser()
    assert cfg.stream.batch_size == 32
    assert cfg.stream.skip_errors is False


def test_bad_batch_size(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("stream:\n  batch_size: 0\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_write_default_config_keeps_existing(tmp_path: Path) -> None:
    target = tmp_path / "conf" / "config.yaml"
    assert write_default_config(target) == target
    written = yaml.safe_load(target.read_text())
    assert written["stream"]["batch_size"] == 256

    target.write_text("stream:\n  batch_size: 8\n")
    write_default_config(target)
    assert load_config(target).stream.batch_size == 8
