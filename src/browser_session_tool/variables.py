"""Placeholder interpolation against the variable store.

Command values may reference secrets with ``${{NAME}}``. Every placeholder is
resolved before a run starts so that a missing value never leaves a half
executed page behind.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

from dotenv import dotenv_values

from .errors import MissingVariableError

PLACEHOLDER_PATTERN = re.compile(r"\$\{\{([^}]+)\}\}")

VariableStore = Mapping[str, str]


def interpolate_text(text: str, variables: VariableStore) -> str:
    """Replace every placeholder in *text* with its value from *variables*."""

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        value = variables.get(name)
        if value is None:
            raise MissingVariableError(name)
        return value

    return PLACEHOLDER_PATTERN.sub(_substitute, text)


def interpolate(value: Any, variables: VariableStore) -> Any:
    """Return a copy of *value* with placeholders resolved in all nested strings."""

    if isinstance(value, str):
        return interpolate_text(value, variables)
    if isinstance(value, Mapping):
        return {key: interpolate(item, variables) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(interpolate(item, variables) for item in value)
    return value


def load_variables(
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> VariableStore:
    """Build a read-only variable store from the environment and an optional .env file.

    Values already present in the process environment take precedence over the
    file, matching how ``python-dotenv`` loads files without overriding.
    """

    values: dict[str, str] = {}
    if env_file is not None and env_file.is_file():
        for key, item in dotenv_values(env_file).items():
            if item is not None:
                values[key] = item
    values.update(os.environ if environ is None else environ)
    return MappingProxyType(values)
