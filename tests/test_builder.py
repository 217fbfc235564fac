# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the declarative construction syntax."""

import pytest

from genro_binarytree import (
    EMPTY,
    BinaryTree,
    Branch,
    InvalidSlotError,
    SlotOrderError,
    binary_tree,
    branch,
    build_children,
    validate_children,
)


def layout(tree):
    """Return every (path, value) of a tree."""
    with tree.root() as root:
        return list(root.walk())


class TestBinaryTreeSyntax:
    """Tests for binary_tree() with mapping children."""

    def test_root_only(self):
        """Test a tree with just a root value."""
        tree = binary_tree('a')
        root = tree.root()
        assert root.value == 'a'
        assert root.left() is None
        assert root.right() is None

    def test_empty_mapping(self):
        """Test an empty mapping adds nothing."""
        tree = binary_tree('a', {})
        assert layout(tree) == [('', 'a')]

    def test_complicated_tree(self):
        """Test nested branches on both sides."""
        tree = binary_tree('root', {
            'left': 'left',
            'right': Branch('right', {
                'right': Branch('rightright', {
                    'left': 'rightrightleft',
                }),
            }),
        })
        root = tree.root()
        assert root.value == 'root'

        left = root.left()
        assert left.value == 'left'
        assert left.left() is None
        assert left.right() is None

        right = root.right()
        assert right.value == 'right'
        assert right.left() is None

        rightright = right.right()
        assert rightright.value == 'rightright'

        rightrightleft = rightright.left()
        assert rightrightleft.value == 'rightrightleft'
        assert rightrightleft.left() is None
        assert rightrightleft.right() is None

    def test_only_right_with_children(self):
        """Test a mapping with only a right branch."""
        tree = binary_tree(1, {'right': Branch(2, {'right': 3})})
        assert layout(tree) == [('', 1), ('right', 2), ('right.right', 3)]

    def test_left_branch_and_right_leaf(self):
        """Test left branch followed by right leaf."""
        tree = binary_tree(1, {'left': Branch(2, {'left': 4}), 'right': 3})
        assert layout(tree) == [('', 1), ('left', 2), ('left.left', 4), ('right', 3)]

    def test_branch_without_children(self):
        """Test a Branch with no children behaves like a leaf."""
        tree = binary_tree(1, {'left': Branch(2)})
        assert layout(tree) == [('', 1), ('left', 2)]

    def test_none_values(self):
        """Test None is stored as a real value in the syntax."""
        tree = binary_tree(None, {'left': None})
        root = tree.root()
        assert root.value is None
        assert root.left() is not None
        assert root.left().value is None

    def test_grandchildren_only_when_specified(self):
        """Test a leaf slot only gets placeholder children."""
        tree = binary_tree('r', {'left': 'a'})
        assert len(tree) == 2
        assert len(tree.store) == 5

    def test_from_spec_alias(self):
        """Test BinaryTree.from_spec delegates to binary_tree."""
        tree = BinaryTree.from_spec('r', {'left': 'a'})
        assert layout(tree) == [('', 'r'), ('left', 'a')]

    def test_check_borrows_passthrough(self):
        """Test check_borrows reaches the tree."""
        tree = binary_tree('r', {'left': 'a'}, check_borrows=False)
        assert tree.check_borrows is False

    def test_tree_is_unborrowed_after_build(self):
        """Test construction leaves no live views behind."""
        tree = binary_tree('r', {'left': Branch('a', {'right': 'b'}), 'right': 'c'})
        assert len(tree.store.borrows) == 0
        tree.root_mut().release()


class TestKeywordSyntax:
    """Tests for keyword slots and branch()."""

    def test_complicated_tree(self):
        """Test keyword form builds the same tree as the mapping form."""
        keywords = binary_tree(
            'root',
            left='left',
            right=branch('right', right=branch('rightright', left='rightrightleft')),
        )
        mapping = binary_tree('root', {
            'left': 'left',
            'right': Branch('right', {
                'right': Branch('rightright', {'left': 'rightrightleft'}),
            }),
        })
        assert layout(keywords) == layout(mapping)

    def test_branch_helper(self):
        """Test branch() builds a Branch with ordered children."""
        node = branch('v', left='a', right='b')
        assert node == Branch('v', {'left': 'a', 'right': 'b'})

    def test_branch_is_unhashable(self):
        """Test Branch compares by value but cannot be hashed."""
        assert Branch.__hash__ is None
        with pytest.raises(TypeError):
            hash(Branch('v'))

    def test_mapping_and_keywords_rejected(self):
        """Test both forms at once raise TypeError."""
        with pytest.raises(TypeError, match="not both"):
            binary_tree('r', {'left': 'a'}, right='b')


class TestRoundTrip:
    """Tests comparing the syntax with explicit set_left/set_right calls."""

    def test_same_layout_as_explicit_calls(self):
        """Test declarative and explicit construction agree."""
        declarative = binary_tree(1, {
            'left': Branch(2, {'left': 4, 'right': Branch(5, {'right': 7})}),
            'right': Branch(3, {'left': 6}),
        })

        explicit = BinaryTree(1)
        with explicit.root_mut() as root:
            with root.set_left(2) as two:
                two.set_left(4).release()
                with two.set_right(5) as five:
                    five.set_right(7).release()
            with root.set_right(3) as three:
                three.set_left(6).release()

        assert layout(declarative) == layout(explicit)
        assert len(declarative.store) == len(explicit.store)


class TestBuildChildren:
    """Tests for build_children() under an existing view."""

    def test_build_under_subtree(self):
        """Test a mapping applied below an existing node."""
        tree = binary_tree('r', {'left': 'a'})
        with tree.root_mut() as root:
            with root.left() as left:
                result = build_children(left, right=branch('b', left='c'))
                assert result is left
        assert layout(tree) == [('', 'r'), ('left', 'a'), ('left.right', 'b'),
                                ('left.right.left', 'c')]

    def test_build_without_children(self):
        """Test build_children with nothing to build."""
        tree = BinaryTree('r')
        with tree.root_mut() as root:
            assert build_children(root) is root
            assert root.is_leaf

    def test_invalid_mapping_leaves_tree_untouched(self):
        """Test validation happens before the first write."""
        tree = BinaryTree('r')
        with tree.root_mut() as root:
            with pytest.raises(InvalidSlotError):
                build_children(root, {'left': Branch('x', {'middle': 1})})
            assert root.left() is None

    def test_empty_value_rejected_before_writing(self):
        """Test an EMPTY slot value fails validation and writes nothing."""
        tree = BinaryTree('r')
        with tree.root_mut() as root:
            with pytest.raises(ValueError, match="'right'"):
                build_children(root, left='a', right=EMPTY)
            assert root.left() is None
            with pytest.raises(ValueError, match="'left.left'"):
                build_children(root, left=branch('a', left=Branch(EMPTY)))
            assert root.left() is None


class TestSyntaxErrors:
    """Tests for grammar violations."""

    def test_unknown_slot(self):
        """Test keys other than left/right are rejected."""
        with pytest.raises(InvalidSlotError, match="middle"):
            binary_tree('r', {'middle': 1})

    def test_unknown_keyword_slot(self):
        """Test unknown keyword slots are rejected."""
        with pytest.raises(InvalidSlotError):
            binary_tree('r', up=1)

    def test_right_before_left(self):
        """Test right listed before left is rejected."""
        with pytest.raises(SlotOrderError):
            binary_tree('r', {'right': 1, 'left': 2})

    def test_nested_right_before_left(self):
        """Test ordering is checked at every depth."""
        with pytest.raises(SlotOrderError, match="'left.right'"):
            validate_children({'left': Branch(1, {'right': Branch(2, {'right': 3, 'left': 4})})})

    def test_children_not_a_mapping(self):
        """Test non-mapping children raise TypeError."""
        with pytest.raises(TypeError, match="mapping"):
            binary_tree('r', ['left', 'right'])
        with pytest.raises(TypeError, match="mapping"):
            binary_tree('r', {'left': Branch(1, 'oops')})
