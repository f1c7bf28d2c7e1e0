"""
Annotation store for parsed .sgoann sources.

An Annotation is an immutable, exact-key mapping from symbol path to
signature text. Symbol paths take three shapes:

- a bare identifier: `Stdin`
- a dotted chain for nested definitions: `Reader.Read`
- a receiver-qualified method: `(*File).Read`

There is no prefix or partial lookup. Callers build the full path for the
node they are visiting and ask for it directly.

Author: xwest
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, Optional


def receiver_key(type_name: str) -> str:
    """Key for a pointer receiver, e.g. `(*File)`."""
    return f"(*{type_name})"


def method_key(type_name: str, method: str) -> str:
    """Key for a method with a pointer receiver, e.g. `(*File).Read`."""
    return f"{receiver_key(type_name)}.{method}"


def join_path(*parts: str) -> str:
    """Join path segments with dots, e.g. `join_path("io", "Reader")`."""
    return ".".join(parts)


class Annotation(Mapping):
    """
    Read-only mapping from symbol path to signature text.

    Built once per parse and never modified afterwards.
    """

    def __init__(self, annotations: Optional[Dict[str, str]] = None):
        self._annotations = MappingProxyType(dict(annotations or {}))

    @classmethod
    def empty(cls) -> 'Annotation':
        return cls()

    def lookup(self, path: str) -> Optional[str]:
        """Return the signature text for an exact symbol path, or None."""
        return self._annotations.get(path)

    def lookup_method(self, type_name: str, method: str) -> Optional[str]:
        """Return the signature text for a pointer-receiver method, or None."""
        return self._annotations.get(method_key(type_name, method))

    def merge(self, *others: 'Annotation') -> 'Annotation':
        """
        Combine this store with others into a new store.

        Later stores win when the same path appears more than once, matching
        how duplicate paths behave inside a single source.
        """
        merged = dict(self._annotations)
        for other in others:
            merged.update(other)
        return Annotation(merged)

    def __getitem__(self, path: str) -> str:
        return self._annotations[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def __repr__(self) -> str:
        return f"Annotation({len(self)} entries)"
