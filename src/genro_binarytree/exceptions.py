# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""BinaryTree exceptions."""

from __future__ import annotations


class BinaryTreeError(Exception):
    """Base exception for BinaryTree errors."""

    pass


class BorrowError(BinaryTreeError):
    """Base exception for violations of the view aliasing rules."""

    pass


class AlreadyBorrowedError(BorrowError):
    """Raised when a view would overlap a live conflicting view."""

    pass


class FrozenViewError(BorrowError):
    """Raised when a view is used while a child view derived from it is alive."""

    pass


class ReleasedViewError(BorrowError):
    """Raised when a released view is used."""

    pass


class InvalidSlotError(BinaryTreeError):
    """Raised when a construction mapping names a slot other than left/right."""

    pass


class SlotOrderError(BinaryTreeError):
    """Raised when a construction mapping lists right before left."""

    pass


class InvariantError(BinaryTreeError, AssertionError):
    """Raised when the tree structure violates its own invariants."""

    pass
