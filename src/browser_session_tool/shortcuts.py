"""Loading of YAML shortcut files into command lists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from .errors import BrowserSessionToolError

LOGGER = logging.getLogger(__name__)


class ShortcutError(BrowserSessionToolError):
    """Raised when a shortcut file cannot be found or read."""


def resolve_shortcut_path(path: Path, search_dirs: Iterable[Path] = ()) -> Path:
    """Locate *path*, trying each search directory for relative paths."""

    if path.is_absolute() or path.exists():
        candidates = [path]
    else:
        candidates = [directory / path for directory in search_dirs]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    searched = ", ".join(str(candidate) for candidate in candidates) or str(path)
    raise ShortcutError(f"Shortcut file not found: {path} (searched: {searched})")


def load_shortcut(path: Path, search_dirs: Iterable[Path] = ()) -> list[dict[str, Any]]:
    """Return the ``commands`` list of a shortcut file.

    Placeholders are left untouched; the runner resolves them once the whole
    list is known.
    """

    resolved = resolve_shortcut_path(path, search_dirs)
    LOGGER.info("Loading shortcut: %s", resolved)
    try:
        data = yaml.safe_load(resolved.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ShortcutError(f"Failed to parse YAML shortcut: {exc}") from exc
    commands = data.get("commands") if isinstance(data, dict) else None
    if not isinstance(commands, list):
        raise ShortcutError('Shortcut file must contain a "commands" array')
    for index, command in enumerate(commands):
        if not isinstance(command, dict):
            raise ShortcutError(f"Command {index} in {resolved} is not a mapping")
    LOGGER.info("Loaded %d commands from shortcut", len(commands))
    return commands
