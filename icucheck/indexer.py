"""Collect the selects and tags of a message by name."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, MutableMapping, TypeVar

from icucheck.messages import Node, Select, Tag

T = TypeVar("T")


@dataclass(frozen=True)
class SelectEntry:
    node: Select
    categories: List[str]

    @property
    def name(self) -> str:
        return self.node.pivot


@dataclass
class MessageIndex:
    selects: Dict[str, SelectEntry] = field(default_factory=dict)
    tags: Dict[str, Tag] = field(default_factory=dict)

    def pivots(self) -> List[str]:
        return [entry.name for entry in self.selects.values()]


def unique_key(mapping: MutableMapping[str, T], name: str) -> str:
    """Return `name`, or `name#N` for the Nth repeat of an already used name."""
    if name not in mapping:
        return name
    suffix = 1
    while f"{name}#{suffix}" in mapping:
        suffix += 1
    return f"{name}#{suffix}"


def index_message(nodes: Iterable[Node], deep: bool = False) -> MessageIndex:
    """Index the selects and tags of a message.

    By default only one select level is indexed: the children of tags belong
    to the same level and are walked, while the contents of selects are left
    for the caller to descend into. With `deep=True` the whole tree is
    indexed in pre-order. Repeated names never overwrite each other: later
    occurrences get a numeric suffix in the key while the node keeps its
    real name.
    """
    index = MessageIndex()
    _collect(nodes, index, deep)
    return index


def _collect(nodes: Iterable[Node], index: MessageIndex, deep: bool) -> None:
    for node in nodes:
        if isinstance(node, Select):
            key = unique_key(index.selects, node.pivot)
            index.selects[key] = SelectEntry(node, node.categories)
            if deep:
                for option in node.options.values():
                    _collect(option.content, index, deep)
        elif isinstance(node, Tag):
            key = unique_key(index.tags, node.name)
            index.tags[key] = node
            _collect(node.children, index, deep)


__all__ = ["MessageIndex", "SelectEntry", "index_message", "unique_key"]
