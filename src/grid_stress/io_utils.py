"""Shared text/YAML I/O helpers."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path
import tempfile
from typing import Any, Optional, Type

import yaml


def read_text(path: Path) -> str:
    with path.open("r", encoding="utf-8") as handle:
        return handle.read()


def write_text_atomic(path: Path, text: str) -> None:
    """Write through a sibling temp file so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def read_yaml_payload(
    path: Path,
    *,
    error_message: Optional[str] = None,
    error_cls: Type[Exception] = ValueError,
) -> Any:
    text = read_text(path)
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        if error_message:
            raise error_cls(error_message) from exc
        raise


__all__ = [
    "read_text",
    "read_yaml_payload",
    "write_text_atomic",
]
