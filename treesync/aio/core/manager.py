"""Lifecycle observer interface for tree models.

A TreeManager is notified by the tree model at four precise boundaries:
after a node is created, before it is destroyed, after a child is attached
and before a child is detached. Managers keep their per-node state in a
side-table keyed by node identity instead of on the nodes themselves.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Tuple

from .node import TreeNode


class TreeManager(ABC):
    """Abstract base class for tree lifecycle observers."""

    def __init__(self):
        self._manager_objects: Dict[Tuple[Hashable, Hashable], Any] = {}

    @staticmethod
    def _key(node: TreeNode) -> Tuple[Hashable, Hashable]:
        return (node.get_tree().get_id(), node.get_id())

    # Lifecycle hooks

    @abstractmethod
    async def creating_node(self, node: TreeNode) -> None:
        """Called after node has been created and registered with its tree."""
        pass

    @abstractmethod
    async def destroying_node(self, node: TreeNode) -> None:
        """Called before node is removed from its tree."""
        pass

    @abstractmethod
    def after_reparenting(self, parent: TreeNode, child: TreeNode, idx: int) -> None:
        """Called after child has been attached to parent at position idx."""
        pass

    @abstractmethod
    def before_orphaning(self, parent: TreeNode, child: TreeNode, idx: int) -> None:
        """Called before child, at position idx, is detached from parent."""
        pass

    # Per-node side-table

    def set_manager_object(self, node: TreeNode, obj: Any) -> None:
        self._manager_objects[self._key(node)] = obj

    def get_manager_object(self, node: TreeNode) -> Any:
        """Get the state stored for node.

        Raises:
            KeyError: if no state is stored for node
        """
        return self._manager_objects[self._key(node)]

    def has_manager_object(self, node: TreeNode) -> bool:
        return self._key(node) in self._manager_objects

    def release_manager_object(self, node: TreeNode) -> Any:
        """Drop and return the state stored for node."""
        return self._manager_objects.pop(self._key(node))

    def manager_object_count(self) -> int:
        return len(self._manager_objects)
