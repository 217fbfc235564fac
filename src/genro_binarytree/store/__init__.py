# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - Generic ordered tree storage.

This package provides the arbitrary-arity tree engine the binary tree
is built on.

The package is organized into:
- core: Tree (root, labels, borrows) and TreeStore (ordered children)
- node: TreeStoreNode and the EMPTY placeholder marker
- borrow: Borrow and BorrowTracker for shared/exclusive access

Example:
    >>> from genro_binarytree.store import Tree
    >>> tree = Tree('root')
    >>> tree.root.append('a').value
    'a'
"""

from .borrow import Borrow, BorrowTracker
from .core import Tree, TreeStore
from .node import EMPTY, TreeStoreNode

__all__ = ["Tree", "TreeStore", "TreeStoreNode", "EMPTY", "Borrow", "BorrowTracker"]
