"""Core interfaces for dependency inversion."""

from __future__ import annotations

from typing import Any, Optional, Protocol


class Resource(Protocol):
    """Protocol for localization resources handed to the checker.

    A resource pairs a source string (or list, or plural mapping) with its
    translation. Whatever parses the resource files only has to provide these
    accessors; the checker never mutates a resource.
    """

    @property
    def type(self) -> str:
        """Return the resource kind: 'string', 'array' or 'plural'."""
        ...

    def get_key(self) -> str:
        ...

    def get_source(self) -> Any:
        """Return a string, a list of strings or a category mapping, per `type`."""
        ...

    def get_target(self) -> Any:
        ...

    def get_comment(self) -> Optional[str]:
        ...

    def get_path(self) -> str:
        ...

    def get_source_locale(self) -> Optional[str]:
        ...

    def get_target_locale(self) -> Optional[str]:
        ...


__all__ = ["Resource"]
