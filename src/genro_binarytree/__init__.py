# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-BinaryTree - Binary trees with lazily materialized child slots.

A lightweight, zero-dependency library providing a binary tree container
with shared/exclusive node views and a declarative construction syntax,
for the Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .builder import Branch, binary_tree, branch, build_children, validate_children
from .exceptions import (
    AlreadyBorrowedError,
    BinaryTreeError,
    BorrowError,
    FrozenViewError,
    InvalidSlotError,
    InvariantError,
    ReleasedViewError,
    SlotOrderError,
)
from .node import LEFT, RIGHT, BinaryNodeMut, BinaryNodeRef
from .store import EMPTY
from .tree import BinaryTree

__all__ = [
    # Core classes
    "BinaryTree",
    "BinaryNodeRef",
    "BinaryNodeMut",
    "EMPTY",
    "LEFT",
    "RIGHT",
    # Construction
    "Branch",
    "branch",
    "binary_tree",
    "build_children",
    "validate_children",
    # Exceptions
    "BinaryTreeError",
    "BorrowError",
    "AlreadyBorrowedError",
    "FrozenViewError",
    "ReleasedViewError",
    "InvalidSlotError",
    "SlotOrderError",
    "InvariantError",
]
