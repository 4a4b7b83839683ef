from __future__ import annotations

import copy
from typing import Any, Mapping, Optional

from django.core.exceptions import FieldDoesNotExist
from django.utils.text import capfirst


def split_path(path: str) -> list[str]:
    """Split a property path written with ``__`` or ``.`` separators."""
    return [part for part in str(path or "").replace(".", "__").split("__") if part]


def humanize(key: str) -> str:
    return capfirst(str(key).replace("__", " ").replace(".", " ").replace("_", " ").strip())


def field_verbose_name(model, path: str) -> Optional[str]:
    """Verbose name of the leaf field of ``path`` on ``model``, or ``None``."""
    if model is None:
        return None
    current = model
    field = None
    for part in split_path(path):
        if current is None:
            return None
        try:
            field = current._meta.get_field(part)
        except FieldDoesNotExist:
            return None
        remote = getattr(field, "remote_field", None)
        current = getattr(remote, "model", None) if remote else None
    if field is None:
        return None
    name = getattr(field, "verbose_name", None) or getattr(field, "name", None)
    return capfirst(name) if name else None


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` into a copy of ``base``; nested mappings merge recursively."""
    merged = copy.deepcopy(dict(base))
    for key, value in (overrides or {}).items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
