"""Tests for building and walking folder forests."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from docserver import folder_tree
from docserver.folder_tree import build_folder_tree, descendant_closure, flatten_folder_tree
from docserver.repositories.folder_repository import Folder

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_folder(folder_id, name, parent_id=None, namespace="mine"):
    return Folder(id=folder_id, name=name, parent_id=parent_id, namespace=namespace, created_at=CREATED)


@pytest.fixture
def sample_folders():
    """
    Docs(1) ─┬─ A(2) ── A1(4)
             └─ B(3)
    Archive(5)
    """
    return [
        make_folder(4, "A1", 2),
        make_folder(3, "B", 1),
        make_folder(5, "Archive"),
        make_folder(2, "A", 1),
        make_folder(1, "Docs"),
    ]


class TestBuildFolderTree:
    def test_empty_input_gives_empty_forest(self):
        assert build_folder_tree([]) == []

    def test_roots_and_children_are_nested(self, sample_folders):
        forest = build_folder_tree(sample_folders)

        assert [node.name for node in forest] == ["Archive", "Docs"]
        docs = forest[1]
        assert [child.name for child in docs.children] == ["A", "B"]
        assert [child.name for child in docs.children[0].children] == ["A1"]
        assert docs.children[1].children == []

    def test_siblings_with_same_name_ordered_by_id(self):
        forest = build_folder_tree([
            make_folder(9, "Same"),
            make_folder(3, "Same"),
            make_folder(5, "Alpha"),
        ])

        assert [(node.name, node.id) for node in forest] == [("Alpha", 5), ("Same", 3), ("Same", 9)]

    def test_every_folder_appears_exactly_once(self, sample_folders):
        forest = build_folder_tree(sample_folders)
        ids = [node.id for node in flatten_folder_tree(forest)]

        assert sorted(ids) == [1, 2, 3, 4, 5]
        assert len(ids) == len(set(ids))

    def test_child_parent_id_matches_its_parent(self, sample_folders):
        for node in flatten_folder_tree(build_folder_tree(sample_folders)):
            for child in node.children:
                assert child.parent_id == node.id

    def test_orphan_is_dropped_with_subtree_and_logged(self, monkeypatch):
        mock_logger = Mock()
        monkeypatch.setattr(folder_tree, "logger", mock_logger)

        forest = build_folder_tree([
            make_folder(1, "Root"),
            make_folder(2, "Lost", parent_id=99),
            make_folder(3, "Below Lost", parent_id=2),
        ])

        ids = [node.id for node in flatten_folder_tree(forest)]
        assert ids == [1]
        mock_logger.warning.assert_called_once()
        assert "[2]" in mock_logger.warning.call_args[0][0]

    def test_no_warning_when_every_parent_is_present(self, monkeypatch, sample_folders):
        mock_logger = Mock()
        monkeypatch.setattr(folder_tree, "logger", mock_logger)

        build_folder_tree(sample_folders)

        mock_logger.warning.assert_not_called()


class TestFlattenFolderTree:
    def test_parents_come_before_children(self, sample_folders):
        order = [node.id for node in flatten_folder_tree(build_folder_tree(sample_folders))]

        assert order == [5, 1, 2, 4, 3]

    def test_flatten_then_rebuild_is_stable(self, sample_folders):
        forest = build_folder_tree(sample_folders)
        flat = [
            make_folder(node.id, node.name, node.parent_id, node.namespace)
            for node in flatten_folder_tree(forest)
        ]

        assert build_folder_tree(flat) == forest


class TestDescendantClosure:
    def test_closure_of_inner_folder(self, sample_folders):
        assert descendant_closure(sample_folders, 1) == {1, 2, 3, 4}

    def test_closure_of_leaf_is_itself(self, sample_folders):
        assert descendant_closure(sample_folders, 4) == {4}

    def test_closure_of_unknown_folder_is_empty(self, sample_folders):
        assert descendant_closure(sample_folders, 42) == set()
