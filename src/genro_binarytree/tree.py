# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""BinaryTree - A binary tree built on the generic tree store.

BinaryTree wraps a storage Tree and constrains it to binary shape:

    - The tree is never empty: the root always holds a value
    - Every populated node has exactly two child slots (left, right)
    - An unpopulated slot is a placeholder node holding EMPTY

Views are the only way to read or write nodes. root() returns a shared
BinaryNodeRef, root_mut() an exclusive BinaryNodeMut covering the whole
tree. The tree's BorrowTracker rejects any view that would alias a live
exclusive view.

Example:
    Basic usage::

        tree = BinaryTree(5)
        with tree.root_mut() as root:
            with root.set_left(3) as left:
                left.set_right(4).release()

        root = tree.root()
        print(root.left().right().value)  # 4

    Declarative construction::

        tree = BinaryTree.from_spec('root', {'left': 'a', 'right': 'b'})
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from .node import BinaryNodeMut, BinaryNodeRef
from .store import EMPTY, Tree


class BinaryTree:
    """A non-empty binary tree with lazily materialized child slots.

    Example:
        >>> tree = BinaryTree('root')
        >>> tree.root().value
        'root'
        >>> tree.root().left() is None
        True
    """

    __slots__ = ('_inner',)

    def __init__(self, root_value: Any, check_borrows: bool = True) -> None:
        """Initialize a BinaryTree.

        Args:
            root_value: Value stored in the root node.
            check_borrows: If True (default), conflicting views raise
                AlreadyBorrowedError and reborrowed views raise
                FrozenViewError. If False, exclusive access becomes a
                caller obligation and no conflicts are detected.
        """
        if root_value is EMPTY:
            raise ValueError("EMPTY cannot be stored in a populated node")
        self._inner = Tree(root_value, check_borrows=check_borrows)
        root = self._inner.root
        root.append(EMPTY)
        root.append(EMPTY)

    @classmethod
    def from_spec(
        cls,
        root_value: Any,
        children: Mapping[str, Any] | None = None,
        **slots: Any,
    ) -> BinaryTree:
        """Build a tree from a nested construction mapping.

        See genro_binarytree.builder.binary_tree for the accepted syntax.
        """
        from .builder import binary_tree
        return binary_tree(root_value, children, **slots)

    def __repr__(self) -> str:
        return f"BinaryTree(root={self._inner.root.value!r}, size={len(self)})"

    def __len__(self) -> int:
        """Return the number of populated nodes."""
        return sum(1 for node in self._inner.iter_nodes() if not node.is_placeholder)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over values in pre-order (root, left subtree, right subtree).

        A shared view of the root is held for the duration of the iteration.
        """
        with self.root() as root:
            for _path, value in root.walk():
                yield value

    @property
    def check_borrows(self) -> bool:
        """Whether the runtime aliasing checks are active."""
        return self._inner.borrows.enabled

    @property
    def store(self) -> Tree:
        """Access the underlying storage Tree."""
        return self._inner

    def root(self) -> BinaryNodeRef:
        """Return a shared view of the root node.

        Raises:
            AlreadyBorrowedError: If an exclusive view is alive.
        """
        node = self._inner.root
        return BinaryNodeRef(node, self._inner.borrows.acquire_shared(node))

    def root_mut(self) -> BinaryNodeMut:
        """Return an exclusive view of the root node, covering every node.

        Raises:
            AlreadyBorrowedError: If any other view is alive.
        """
        node = self._inner.root
        return BinaryNodeMut(node, self._inner.borrows.acquire_exclusive(node))
