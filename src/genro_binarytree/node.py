# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Binary node views.

A view is a window onto one populated node of the storage tree and the
subtree below it. Every populated node owns exactly two children in
storage: the first is the left slot, the second the right slot. A slot
whose value is EMPTY is a placeholder and reads as "no child".

Two flavors exist:

    - **BinaryNodeRef**: shared, read-only. Any number may coexist.
    - **BinaryNodeMut**: exclusive, mutable. Navigating from it reborrows
      it: the parent view is frozen until the child view is released.

Each view holds a Borrow registered with the tree's BorrowTracker. The
borrow ends when release() is called, when a ``with`` block exits, or
when the view is garbage collected.

Example:
    >>> tree = BinaryTree(5)
    >>> with tree.root_mut() as root:
    ...     root.set_left(3).release()
    >>> tree.root().left().value
    3
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Iterator

from .exceptions import InvariantError
from .store import EMPTY, Borrow, TreeStoreNode

logger = logging.getLogger(__name__)

# The constant representing the left child slot of a node.
LEFT = "left"
# The constant representing the right child slot of a node.
RIGHT = "right"

SLOTS = (LEFT, RIGHT)


def _slot_node(node: TreeStoreNode, side: str) -> TreeStoreNode:
    """Return the storage node for the given slot of a populated node."""
    if node.is_placeholder or node.children is None or len(node.children) != 2:
        raise InvariantError(
            f"Populated node '{node.label}' must have exactly two child slots"
        )
    if side == LEFT:
        return node.first_child
    if side == RIGHT:
        return node.last_child
    raise KeyError(f"Path segment '{side}' not found")


class _NodeView:
    """Behavior shared by both view flavors."""

    __slots__ = ('_node', '_borrow', '_finalizer', '__weakref__')

    def __init__(self, node: TreeStoreNode, borrow: Borrow) -> None:
        if node.is_placeholder:
            borrow.release()
            raise InvariantError(f"Cannot view placeholder node '{node.label}'")
        self._node = node
        self._borrow = borrow
        self._finalizer = weakref.finalize(self, borrow.release)

    def __repr__(self) -> str:
        if self._borrow.released:
            return f"{type(self).__name__}({self._node.label!r}, released)"
        return f"{type(self).__name__}({self._node.label!r}, value={self._node.value!r})"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def release(self) -> None:
        """End this view's borrow. Further use raises ReleasedViewError."""
        self._finalizer()

    @property
    def released(self) -> bool:
        return self._borrow.released

    def _get_value(self) -> Any:
        self._borrow.check()
        value = self._node.value
        if value is EMPTY:
            raise InvariantError(f"Node '{self._node.label}' lost its value")
        return value

    @property
    def value(self) -> Any:
        """The node's value. Always present on a view."""
        return self._get_value()

    @property
    def is_leaf(self) -> bool:
        """True if both child slots are placeholders."""
        self._borrow.check()
        return all(_slot_node(self._node, side).is_placeholder for side in SLOTS)

    def _wrap(self, node: TreeStoreNode) -> _NodeView:
        raise NotImplementedError

    def _child(self, side: str) -> _NodeView | None:
        self._borrow.check()
        child = _slot_node(self._node, side)
        if child.is_placeholder:
            return None
        return self._wrap(child)

    def get(self, path: str) -> _NodeView | None:
        """Navigate a dotted path of slots.

        Args:
            path: Slots separated by dots (e.g., 'right.right.left').

        Returns:
            A view of the same flavor on the target node, or None if any
            step along the path is a placeholder.

        Raises:
            KeyError: If the path is empty or a segment is not a slot name.

        Example:
            >>> tree.root().get('right.left').value
            'rightleft'
        """
        if not path:
            raise KeyError("Empty path")
        segments = path.split('.')
        for segment in segments:
            if segment not in SLOTS:
                raise KeyError(f"Path segment '{segment}' not found")
        current: _NodeView | None = self
        for segment in segments:
            current = current._child(segment)
            if current is None:
                return None
        return current

    def walk(self) -> Iterator[tuple[str, Any]]:
        """Walk the populated subtree in pre-order.

        Yields:
            Tuples of (path, value). The path of this node is '', its
            descendants use dotted slot paths ('left', 'right.left', ...).

        Example:
            >>> for path, value in tree.root().walk():
            ...     print(path or '<root>', value)
        """
        stack = [('', self._node)]
        while stack:
            self._borrow.check()
            path, node = stack.pop()
            yield path, node.value
            for side in reversed(SLOTS):
                child = _slot_node(node, side)
                if not child.is_placeholder:
                    stack.append((f"{path}.{side}" if path else side, child))


class BinaryNodeRef(_NodeView):
    """Shared, read-only view of a populated node.

    Shared views may alias freely: copy.copy() and copy.deepcopy() produce
    an independent view of the same node with its own borrow. Two views
    compare equal when they point at the same node.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryNodeRef):
            return NotImplemented
        return self._node is other._node

    def __hash__(self) -> int:
        return hash(id(self._node))

    def __copy__(self) -> BinaryNodeRef:
        self._borrow.check()
        return self._wrap(self._node)

    def __deepcopy__(self, memo: dict[int, Any]) -> BinaryNodeRef:
        # Same node, new borrow.
        return self.__copy__()

    def _wrap(self, node: TreeStoreNode) -> BinaryNodeRef:
        return BinaryNodeRef(node, node.tree.borrows.acquire_shared(node))

    def left(self) -> BinaryNodeRef | None:
        """Return the left child, if populated."""
        return self._child(LEFT)

    def right(self) -> BinaryNodeRef | None:
        """Return the right child, if populated."""
        return self._child(RIGHT)


class BinaryNodeMut(_NodeView):
    """Exclusive, mutable view of a populated node.

    Any child view obtained from left(), right(), set_left() or set_right()
    reborrows this view: while the child is alive this view raises
    FrozenViewError on use. The child keeps a reference to this view, so
    the chain stays alive as long as the innermost view does. Exclusive
    views cannot be copied.

    Example:
        >>> with tree.root_mut() as root:
        ...     root.set_left(1).set_left(2).release()
        ...     root.set_right(3).release()
    """

    __slots__ = ('_parent',)

    def __init__(
        self,
        node: TreeStoreNode,
        borrow: Borrow,
        parent: BinaryNodeMut | None = None,
    ) -> None:
        super().__init__(node, borrow)
        self._parent = parent

    def __copy__(self) -> BinaryNodeMut:
        raise TypeError(f"'{type(self).__name__}' is an exclusive view and cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> BinaryNodeMut:
        return self.__copy__()

    @property
    def value(self) -> Any:
        """The node's value. Assign to replace it."""
        return self._get_value()

    @value.setter
    def value(self, value: Any) -> None:
        self._borrow.check()
        if value is EMPTY:
            raise ValueError("EMPTY cannot be stored in a populated node")
        self._node.value = value

    def release(self) -> None:
        """End this view's borrow and drop the reference to its parent view."""
        super().release()
        self._parent = None

    def _wrap(self, node: TreeStoreNode) -> BinaryNodeMut:
        borrow = node.tree.borrows.acquire_exclusive(node, parent=self._borrow)
        return BinaryNodeMut(node, borrow, parent=self)

    def left(self) -> BinaryNodeMut | None:
        """Return the left child, if populated."""
        return self._child(LEFT)

    def right(self) -> BinaryNodeMut | None:
        """Return the right child, if populated."""
        return self._child(RIGHT)

    def _set(self, side: str, value: Any) -> BinaryNodeMut:
        self._borrow.check()
        if value is EMPTY:
            raise ValueError("EMPTY cannot be stored in a populated node")
        slot = _slot_node(self._node, side)
        borrow = slot.tree.borrows.acquire_exclusive(slot, parent=self._borrow)
        slot.value = value
        # An overwritten slot keeps its existing children.
        if not slot.has_children:
            slot.append(EMPTY)
            slot.append(EMPTY)
            logger.debug("Materialized %s slot '%s'", side, slot.label)
        return BinaryNodeMut(slot, borrow, parent=self)

    def set_left(self, value: Any) -> BinaryNodeMut:
        """Set the left child to value and return a view of it."""
        return self._set(LEFT, value)

    def set_right(self, value: Any) -> BinaryNodeMut:
        """Set the right child to value and return a view of it."""
        return self._set(RIGHT, value)
