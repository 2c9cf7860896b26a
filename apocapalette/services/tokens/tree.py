"""
Apocapalette Token Tree

Immutable token tree built from an explicit Leaf/Group union. A node is a
leaf only when it is a Leaf instance, so a group is free to have children
named "type" or "value". Updates return new trees and never touch the
original.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union


_HEX_RE = re.compile(r"^#[0-9a-f]{6}$")
_DIMENSION_RE = re.compile(r"^-?\d+(\.\d+)?(px|rem|em|%)$")


@dataclass(frozen=True)
class Leaf:
    """A typed token value (color, dimension, string, number, opacity)."""
    type: str
    value: Any
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type, "value": self.value}
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass(frozen=True)
class Group:
    """A named collection of child nodes."""
    children: Mapping[str, "TokenNode"]

    def __post_init__(self):
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def to_dict(self) -> Dict[str, Any]:
        return {name: child.to_dict() for name, child in self.children.items()}


TokenNode = Union[Leaf, Group]
Path = Tuple[str, ...]


def color(value: str, **metadata) -> Leaf:
    return Leaf("color", value, metadata)


def leaf_from_value(value: Any) -> Leaf:
    """
    Wrap a raw Python value in a Leaf.

    Lowercase #rrggbb strings become color leaves, CSS lengths become
    dimensions, numbers become number leaves and any other string is kept
    as a string leaf.
    """
    if isinstance(value, Leaf):
        return value
    if isinstance(value, bool):
        return Leaf("boolean", value)
    if isinstance(value, (int, float)):
        return Leaf("number", value)
    if isinstance(value, str):
        if _HEX_RE.match(value):
            return Leaf("color", value)
        if _DIMENSION_RE.match(value):
            return Leaf("dimension", value)
        return Leaf("string", value)
    raise TypeError(f"Unsupported token value: {value!r}")


def build_node(value: Any) -> TokenNode:
    """Build a node from nested dicts of raw values, Leaf or Group instances."""
    if isinstance(value, (Leaf, Group)):
        return value
    if isinstance(value, Mapping):
        return Group({name: build_node(child) for name, child in value.items()})
    return leaf_from_value(value)


def _split(path: Union[str, Path], sep: str) -> Path:
    if isinstance(path, tuple):
        return path
    return tuple(part for part in path.split(sep) if part)


@dataclass(frozen=True)
class TokenTree:
    """Root mapping of category name to token node."""
    root: Group

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TokenTree":
        node = build_node(data)
        if not isinstance(node, Group):
            raise TypeError("Token tree root must be a mapping")
        return cls(node)

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self.root.children.keys())

    def __contains__(self, name: str) -> bool:
        return name in self.root.children

    def __getitem__(self, name: str) -> TokenNode:
        return self.root.children[name]

    def get(self, path: Union[str, Path], sep: str = ".") -> Optional[TokenNode]:
        """Look up a node by dotted path (or tuple of names)."""
        node: TokenNode = self.root
        for part in _split(path, sep):
            if not isinstance(node, Group) or part not in node.children:
                return None
            node = node.children[part]
        return node

    def value(self, path: Union[str, Path], sep: str = ".") -> Optional[Any]:
        """Value of the leaf at `path`, or None when missing or a group."""
        node = self.get(path, sep)
        return node.value if isinstance(node, Leaf) else None

    def iter_leaves(self) -> Iterator[Tuple[Path, Leaf]]:
        """Depth-first walk over every leaf in insertion order."""
        stack = [((), self.root)]
        while stack:
            prefix, node = stack.pop()
            if isinstance(node, Leaf):
                yield prefix, node
                continue
            for name in reversed(list(node.children.keys())):
                stack.append((prefix + (name,), node.children[name]))

    def replace(self, path: Union[str, Path], node: Any, sep: str = ".") -> "TokenTree":
        """Return a new tree with `node` placed at `path`; intermediate groups are created."""
        parts = _split(path, sep)
        if not parts:
            raise KeyError("Empty token path")
        return TokenTree(_replace_in(self.root, parts, build_node(node)))

    def with_values(self, updates: Mapping[str, Any], sep: str = ".") -> "TokenTree":
        """Return a new tree with several leaf values replaced, keeping each leaf's type."""
        tree = self
        for path, value in updates.items():
            existing = tree.get(path, sep)
            if isinstance(existing, Leaf):
                tree = tree.replace(path, Leaf(existing.type, value, existing.metadata), sep)
            else:
                tree = tree.replace(path, value, sep)
        return tree

    def to_dict(self) -> Dict[str, Any]:
        return self.root.to_dict()


def _replace_in(group: Group, parts: Path, node: TokenNode) -> Group:
    head, rest = parts[0], parts[1:]
    children = dict(group.children)
    if not rest:
        children[head] = node
        return Group(children)
    child = children.get(head)
    if not isinstance(child, Group):
        child = Group({})
    children[head] = _replace_in(child, rest, node)
    return Group(children)
