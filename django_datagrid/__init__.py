"""Configuration-driven datagrids for Django."""

from .conf import settings

__all__ = ["settings"]
