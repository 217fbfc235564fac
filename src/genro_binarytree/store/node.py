# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Storage node for the generic tree engine."""

from __future__ import annotations

from typing import Any, Iterator, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import Tree, TreeStore


class _Empty:
    """Marker for a value slot that has not been populated yet."""

    __slots__ = ()
    _instance: _Empty | None = None

    def __new__(cls) -> _Empty:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'EMPTY'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'EMPTY'


EMPTY = _Empty()


class TreeStoreNode:
    """A node in a storage Tree.

    Each node has:
    - label: Auto-generated name, unique within the owning tree
    - value: The stored payload, or EMPTY for a placeholder
    - parent: The TreeStore containing this node (None for the root)
    - children: TreeStore of child nodes, created on first append
    - tree: The owning Tree

    Example:
        >>> tree = Tree('root')
        >>> child = tree.root.append(EMPTY)
        >>> child.is_placeholder
        True
    """

    __slots__ = ('label', 'value', 'parent', 'children', 'tree')

    def __init__(
        self,
        label: str,
        value: Any = EMPTY,
        parent: TreeStore | None = None,
        tree: Tree | None = None,
    ) -> None:
        self.label = label
        self.value = value
        self.parent = parent
        self.children: TreeStore | None = None
        self.tree = tree

    def __repr__(self) -> str:
        n_children = len(self.children) if self.children is not None else 0
        return f"TreeStoreNode({self.label!r}, value={self.value!r}, children={n_children})"

    @property
    def is_placeholder(self) -> bool:
        """True if the value slot has not been populated."""
        return self.value is EMPTY

    @property
    def has_children(self) -> bool:
        """True if at least one child has been appended."""
        return self.children is not None and len(self.children) > 0

    @property
    def parent_node(self) -> TreeStoreNode | None:
        """The node owning the store this node lives in."""
        if self.parent is None:
            return None
        return self.parent.parent

    @property
    def first_child(self) -> TreeStoreNode | None:
        """First appended child, or None if there are no children."""
        if not self.has_children:
            return None
        return self.children._get_node_by_position(0)

    @property
    def last_child(self) -> TreeStoreNode | None:
        """Last appended child, or None if there are no children."""
        if not self.has_children:
            return None
        return self.children._get_node_by_position(-1)

    def append(self, value: Any = EMPTY) -> TreeStoreNode:
        """Append a new child holding value and return it."""
        from .core import TreeStore

        if self.children is None:
            self.children = TreeStore(parent=self)
        if self.tree is not None:
            label = self.tree._generate_label()
        else:
            label = f"node_{len(self.children)}"
        node = TreeStoreNode(label, value, parent=self.children, tree=self.tree)
        self.children._insert_node(node)
        return node

    def iter_ancestors(self) -> Iterator[TreeStoreNode]:
        """Yield this node and then each ancestor up to the root."""
        node: TreeStoreNode | None = self
        while node is not None:
            yield node
            node = node.parent_node

    def is_ancestor_of(self, other: TreeStoreNode) -> bool:
        """True if self is other or one of its ancestors."""
        return any(node is self for node in other.iter_ancestors())

    def overlaps(self, other: TreeStoreNode) -> bool:
        """True if either node lies in the other's subtree."""
        return self.is_ancestor_of(other) or other.is_ancestor_of(self)
