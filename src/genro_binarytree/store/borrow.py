# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Runtime borrow tracking for views into a Tree.

A borrow records that a view onto a node (and therefore onto the subtree
below it) is alive. Two nodes overlap when one is an ancestor-or-self of
the other. The rules are:

    - a shared borrow conflicts with any live exclusive borrow it overlaps
    - an exclusive borrow conflicts with any live borrow it overlaps,
      except the parent borrow it was derived from (and that parent's own
      chain of parents)

Deriving an exclusive borrow from a parent exclusive borrow is a reborrow:
the parent stays live but is frozen until the child is released.
Releasing a borrow releases its reborrow first.
"""

from __future__ import annotations

import logging
from typing import Iterator, TYPE_CHECKING

from ..exceptions import (
    AlreadyBorrowedError,
    FrozenViewError,
    InvariantError,
    ReleasedViewError,
)

if TYPE_CHECKING:
    from .node import TreeStoreNode

logger = logging.getLogger(__name__)


class Borrow:
    """A live claim on a node held by exactly one view."""

    __slots__ = ('tracker', 'node', 'exclusive', 'parent', 'child', 'released')

    def __init__(
        self,
        tracker: BorrowTracker,
        node: TreeStoreNode,
        exclusive: bool,
        parent: Borrow | None = None,
    ) -> None:
        self.tracker = tracker
        self.node = node
        self.exclusive = exclusive
        self.parent = parent
        self.child: Borrow | None = None
        self.released = False

    def __repr__(self) -> str:
        kind = 'exclusive' if self.exclusive else 'shared'
        state = 'released' if self.released else ('frozen' if self.is_frozen else 'live')
        return f"Borrow({self.node.label!r}, {kind}, {state})"

    @property
    def is_frozen(self) -> bool:
        """True while a reborrow derived from this borrow is live."""
        return self.child is not None

    def iter_chain(self) -> Iterator[Borrow]:
        """Yield this borrow and the borrows it was derived from."""
        borrow: Borrow | None = self
        while borrow is not None:
            yield borrow
            borrow = borrow.parent

    def check(self) -> None:
        """Ensure the borrow may be used right now.

        Raises:
            ReleasedViewError: If the borrow has been released.
            FrozenViewError: If a reborrow of this borrow is still live.
        """
        if self.released:
            raise ReleasedViewError(f"View on '{self.node.label}' has been released")
        if self.child is not None:
            raise FrozenViewError(
                f"View on '{self.node.label}' is frozen by a live view on "
                f"'{self.child.node.label}'"
            )

    def release(self) -> None:
        """End the borrow. Releasing twice is a no-op."""
        if self.released:
            return
        if self.child is not None:
            self.child.release()
        self.released = True
        self.tracker._discard(self)
        if self.parent is not None and self.parent.child is self:
            self.parent.child = None
        logger.debug("Released %r", self)


class BorrowTracker:
    """Registry of the live borrows into one Tree.

    Attributes:
        enabled: If False, conflicting borrows are not rejected and
            reborrows do not freeze their parent. Released borrows are
            still refused.
    """

    __slots__ = ('_active', 'enabled')

    def __init__(self, enabled: bool = True) -> None:
        self._active: dict[Borrow, None] = {}
        self.enabled = enabled

    def __len__(self) -> int:
        return len(self._active)

    def __iter__(self) -> Iterator[Borrow]:
        return iter(list(self._active))

    def __repr__(self) -> str:
        return f"BorrowTracker({list(self._active)})"

    def _discard(self, borrow: Borrow) -> None:
        self._active.pop(borrow, None)

    def _conflicts(
        self, node: TreeStoreNode, exclusive: bool, allowed: set[Borrow]
    ) -> Borrow | None:
        for borrow in self._active:
            if borrow in allowed:
                continue
            if not exclusive and not borrow.exclusive:
                continue
            if borrow.node.overlaps(node):
                return borrow
        return None

    def acquire_shared(self, node: TreeStoreNode) -> Borrow:
        """Register a shared borrow on node.

        Raises:
            AlreadyBorrowedError: If a live exclusive borrow overlaps node.
        """
        if self.enabled:
            conflict = self._conflicts(node, exclusive=False, allowed=set())
            if conflict is not None:
                raise AlreadyBorrowedError(
                    f"Cannot borrow '{node.label}': already borrowed by {conflict!r}"
                )
        borrow = Borrow(self, node, exclusive=False)
        self._active[borrow] = None
        logger.debug("Acquired %r", borrow)
        return borrow

    def acquire_exclusive(
        self, node: TreeStoreNode, parent: Borrow | None = None
    ) -> Borrow:
        """Register an exclusive borrow on node.

        Args:
            node: The node to borrow.
            parent: The exclusive borrow being reborrowed, if any. It must
                cover node and becomes frozen until the new borrow ends.

        Raises:
            AlreadyBorrowedError: If another live borrow overlaps node.
            ReleasedViewError: If parent has been released.
            FrozenViewError: If parent already has a live reborrow.
        """
        allowed: set[Borrow] = set()
        if parent is not None:
            parent.check()
            if not parent.exclusive or not parent.node.is_ancestor_of(node):
                raise InvariantError(
                    f"{parent!r} cannot be reborrowed for '{node.label}'"
                )
            allowed = set(parent.iter_chain())
        if self.enabled:
            conflict = self._conflicts(node, exclusive=True, allowed=allowed)
            if conflict is not None:
                raise AlreadyBorrowedError(
                    f"Cannot mutably borrow '{node.label}': already borrowed by {conflict!r}"
                )
        borrow = Borrow(self, node, exclusive=True, parent=parent)
        if self.enabled and parent is not None:
            parent.child = borrow
        self._active[borrow] = None
        logger.debug("Acquired %r", borrow)
        return borrow
