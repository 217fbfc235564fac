# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Generic ordered tree storage.

This module provides the storage engine the binary tree is built on:

    - **Tree**: owns the root node, the label counter and the borrow tracker
    - **TreeStore**: ordered container of the children of one node, with
      O(1) positional access (first child, last child)

Nodes are only ever appended: children are never reordered or removed,
so a node keeps its position and identity for the lifetime of its tree.

Example:
    >>> tree = Tree('root')
    >>> a = tree.root.append('a')
    >>> b = tree.root.append('b')
    >>> tree.root.last_child is b
    True
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .borrow import BorrowTracker
from .node import EMPTY, TreeStoreNode

logger = logging.getLogger(__name__)


class TreeStore:
    """Ordered children of a single TreeStoreNode.

    Attributes:
        parent: The TreeStoreNode whose children this store holds.
    """

    __slots__ = ('_order', 'parent')

    def __init__(self, parent: TreeStoreNode | None = None) -> None:
        self._order: list[TreeStoreNode] = []
        self.parent = parent

    def __repr__(self) -> str:
        return f"TreeStore({[n.label for n in self._order]})"

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[TreeStoreNode]:
        """Iterate over child nodes in insertion order."""
        return iter(self._order)

    def _get_node_by_position(self, index: int) -> TreeStoreNode:
        """Get node by positional index (supports negative indexing).

        Raises:
            KeyError: If index is out of range.
        """
        if index < 0:
            index = len(self._order) + index
        if index < 0 or index >= len(self._order):
            raise KeyError(f"Position #{index} out of range (0-{len(self._order)-1})")
        return self._order[index]

    def _insert_node(self, node: TreeStoreNode) -> None:
        """Append a node at the end of the order."""
        self._order.append(node)


class Tree:
    """An arbitrary-arity tree with a single root.

    The tree owns every node created through it: nodes are appended via
    TreeStoreNode.append() and live as long as the tree does.

    Attributes:
        root: The root TreeStoreNode.
        borrows: BorrowTracker recording the live views into this tree.

    Example:
        >>> tree = Tree('root')
        >>> tree.root.append('child').value
        'child'
    """

    __slots__ = ('root', 'borrows', '_label_counter')

    def __init__(self, root_value: Any = EMPTY, check_borrows: bool = True) -> None:
        """Initialize a Tree.

        Args:
            root_value: Value stored in the root node.
            check_borrows: If False, borrows are recorded but never
                rejected (see BorrowTracker).
        """
        self._label_counter = 0
        self.borrows = BorrowTracker(enabled=check_borrows)
        self.root = TreeStoreNode(self._generate_label(), root_value, tree=self)
        logger.debug("Created tree with root %r", self.root)

    def __repr__(self) -> str:
        return f"Tree(root={self.root!r})"

    def _generate_label(self) -> str:
        """Generate a tree-unique label.

        Uses pattern: node_0, node_1, node_2, ...
        Counter always increments (never reuses numbers).
        """
        n = self._label_counter
        self._label_counter = n + 1
        return f"node_{n}"

    def __len__(self) -> int:
        """Return the total number of nodes, placeholders included."""
        return sum(1 for _ in self.iter_nodes())

    def iter_nodes(self) -> Iterator[TreeStoreNode]:
        """Yield every node in pre-order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.children is not None:
                stack.extend(reversed(node.children._order))
