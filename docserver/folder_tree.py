"""Turns flat folder rows into a nested forest, and walks it back."""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Set

from common.logging_config import get_logger
from docserver.repositories.folder_repository import Folder

logger = get_logger(__name__)


@dataclass
class FolderNode:
    id: int
    name: str
    parent_id: Optional[int]
    namespace: str
    created_at: datetime
    children: List["FolderNode"] = field(default_factory=list)


def _children_index(folders: Sequence[Folder]) -> Dict[Optional[int], List[Folder]]:
    index: Dict[Optional[int], List[Folder]] = defaultdict(list)
    for folder in folders:
        index[folder.parent_id].append(folder)
    return index


def build_folder_tree(folders: Sequence[Folder]) -> List[FolderNode]:
    """
    Build a forest rooted at every folder without a parent.

    Siblings are ordered by name, then id. A folder whose parent is not in
    the input is dropped together with its subtree; the dropped ids are
    logged as a warning.

    Args:
        folders: Every folder row of one namespace, in any order

    Returns:
        Root nodes, each carrying its nested children
    """
    children_by_parent = _children_index(folders)

    def build(parent_id: Optional[int]) -> List[FolderNode]:
        siblings = sorted(children_by_parent.get(parent_id, ()), key=lambda f: (f.name, f.id))
        return [
            FolderNode(
                id=folder.id,
                name=folder.name,
                parent_id=folder.parent_id,
                namespace=folder.namespace,
                created_at=folder.created_at,
                children=build(folder.id),
            )
            for folder in siblings
        ]

    forest = build(None)

    known_ids = {folder.id for folder in folders}
    orphan_ids = sorted(
        folder.id for folder in folders
        if folder.parent_id is not None and folder.parent_id not in known_ids
    )
    if orphan_ids:
        logger.warning(f"Dropping folders whose parent is missing from the listing: {orphan_ids}")

    return forest


def flatten_folder_tree(forest: Sequence[FolderNode]) -> Iterator[FolderNode]:
    """
    Yield every node of the forest, depth-first, parents before children.
    """
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def descendant_closure(folders: Sequence[Folder], root_id: int) -> Set[int]:
    """
    Ids of root_id and every folder reachable below it.

    Breadth-first over an adjacency map built from one bulk folder fetch.
    Returns an empty set when root_id is not among folders.
    """
    if not any(folder.id == root_id for folder in folders):
        return set()

    children_by_parent = _children_index(folders)
    closure = {root_id}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for child in children_by_parent.get(current, ()):
            if child.id not in closure:
                closure.add(child.id)
                queue.append(child.id)
    return closure
