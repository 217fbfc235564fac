# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Declarative construction of binary trees.

A tree is described by a root value and a children mapping keyed by slot
name. Each mapping value is either a leaf value or a Branch, i.e. a value
followed by its own children mapping::

    tree = binary_tree('root', {
        'left': 'left',
        'right': Branch('right', {
            'right': Branch('rightright', {'left': 'rightrightleft'}),
        }),
    })

The same tree with keyword slots::

    tree = binary_tree(
        'root',
        left='left',
        right=branch('right', right=branch('rightright', left='rightrightleft')),
    )

Rules:
    - A mapping may omit either slot, or be empty
    - If both slots are present, 'left' must come before 'right'
    - Only 'left' and 'right' are valid keys

Construction is nothing more than set_left()/set_right() calls on
BinaryNodeMut views. The whole mapping is validated before the first
write, so a rejected mapping never leaves a half-built tree behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .exceptions import InvalidSlotError, SlotOrderError
from .node import LEFT, RIGHT, SLOTS, BinaryNodeMut
from .store import EMPTY
from .tree import BinaryTree

logger = logging.getLogger(__name__)


@dataclass
class Branch:
    """A slot value followed by a nested children mapping.

    Branch compares by value and is unhashable, like the mapping it holds.
    """
    value: Any
    children: Mapping[str, Any] = field(default_factory=dict)


def branch(value: Any, **children: Any) -> Branch:
    """Create a Branch using keyword slots: branch('v', left='a', right='b')."""
    return Branch(value, children)


def _merge_slots(
    children: Mapping[str, Any] | None, slots: dict[str, Any]
) -> Mapping[str, Any] | None:
    if children is not None and slots:
        raise TypeError("Pass children either as a mapping or as keyword slots, not both")
    if slots:
        return slots
    return children


def validate_children(children: Mapping[str, Any], _path: str = '') -> None:
    """Check a children mapping recursively without touching any tree.

    Args:
        children: Mapping of slot name to leaf value or Branch.
        _path: Internal use for error messages.

    Raises:
        TypeError: If children (at any depth) is not a mapping.
        InvalidSlotError: If a key is not 'left' or 'right'.
        SlotOrderError: If 'right' is listed before 'left'.
        ValueError: If a slot value is EMPTY.
    """
    where = f"'{_path}'" if _path else 'root'
    if not isinstance(children, Mapping):
        raise TypeError(
            f"children of {where} must be a mapping, not {type(children).__name__}"
        )
    keys = list(children)
    for key in keys:
        if key not in SLOTS:
            raise InvalidSlotError(
                f"Slot '{key}' is not valid under {where}. Allowed: {list(SLOTS)}"
            )
    if keys == [RIGHT, LEFT]:
        raise SlotOrderError(f"Slot 'left' must precede 'right' under {where}")
    for key in keys:
        spec = children[key]
        path = f"{_path}.{key}" if _path else key
        value = spec.value if isinstance(spec, Branch) else spec
        if value is EMPTY:
            raise ValueError(f"EMPTY cannot be stored in slot '{path}'")
        if isinstance(spec, Branch):
            validate_children(spec.children, path)


def _apply(node: BinaryNodeMut, children: Mapping[str, Any]) -> None:
    for side in SLOTS:
        if side not in children:
            continue
        spec = children[side]
        setter = node.set_left if side == LEFT else node.set_right
        if isinstance(spec, Branch):
            with setter(spec.value) as child:
                _apply(child, spec.children)
        else:
            setter(spec).release()


def build_children(
    node: BinaryNodeMut,
    children: Mapping[str, Any] | None = None,
    **slots: Any,
) -> BinaryNodeMut:
    """Populate the slots below an exclusive view.

    Args:
        node: The exclusive view to build under. It must not be frozen.
        children: Mapping of slot name to leaf value or Branch.
        **slots: Alternative to children: left=..., right=...

    Returns:
        The same view, for chaining.

    Example:
        >>> with tree.root_mut() as root:
        ...     build_children(root, left='a', right=branch('b', left='c'))
    """
    children = _merge_slots(children, slots)
    if children is None:
        return node
    validate_children(children)
    _apply(node, children)
    return node


def binary_tree(
    root_value: Any,
    children: Mapping[str, Any] | None = None,
    *,
    check_borrows: bool = True,
    **slots: Any,
) -> BinaryTree:
    """Create a BinaryTree from a root value and optional nested children.

    Args:
        root_value: Value of the root node.
        children: Mapping of slot name to leaf value or Branch.
        check_borrows: Passed to BinaryTree.
        **slots: Alternative to children: left=..., right=...

    Returns:
        The new tree. Only the slots named in children are populated.

    Raises:
        TypeError: If children is not a mapping, or both forms are given.
        InvalidSlotError: If a key is not 'left' or 'right'.
        SlotOrderError: If 'right' is listed before 'left'.
        ValueError: If a slot value is EMPTY.

    Example:
        >>> tree = binary_tree('a', {'left': 'b'})
        >>> tree.root().left().value
        'b'
    """
    children = _merge_slots(children, slots)
    if children is not None:
        validate_children(children)
    tree = BinaryTree(root_value, check_borrows=check_borrows)
    if children:
        with tree.root_mut() as root:
            _apply(root, children)
    logger.debug("Built %r", tree)
    return tree
