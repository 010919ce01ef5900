"""Tree model abstraction.

Defines the interface the editor consumes from a tree model. The tree
model owns nodes, parent/child links, identity and serial allocation, and
must notify its registered TreeManagers around every structural change.
Creation and destruction are async; attaching and detaching are sync.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional, Sequence


class TreeNode(ABC):
    """Abstract base class for nodes of an editable tree.

    A node's parent reference and its parent's children sequence are kept
    mutually consistent by the implementation.
    """

    @abstractmethod
    def get_tree(self) -> 'Tree':
        """Get the tree this node belongs to."""
        pass

    @abstractmethod
    def get_id(self) -> Hashable:
        """Get the node identity, unique within its tree."""
        pass

    @abstractmethod
    def get_parent(self) -> Optional['TreeNode']:
        """Get the parent node, or None for the root and orphans."""
        pass

    @abstractmethod
    def get_children(self) -> Sequence['TreeNode']:
        """Get the ordered children.

        The returned sequence may be the live list; callers that mutate the
        tree while iterating must take a copy first.
        """
        pass

    @abstractmethod
    def orphan(self) -> None:
        """Detach this node from its parent.

        Managers' before_orphaning hooks fire before the link is removed.
        """
        pass

    @abstractmethod
    def reparent(self, parent: 'TreeNode', idx: int = -1) -> None:
        """Attach this (parentless) node under parent at position idx.

        idx == -1 appends as last child. Managers' after_reparenting hooks
        fire after the link is established.
        """
        pass

    @property
    @abstractmethod
    def destroyed(self) -> bool:
        """True once the tree has destroyed this node."""
        pass

    # Optional methods with default implementations

    def get_child(self, idx: int) -> 'TreeNode':
        """Get the child at position idx."""
        return self.get_children()[idx]

    def find_child_idx(self, child: 'TreeNode') -> int:
        """Get the position of child among this node's children.

        Raises:
            ValueError: if child is not a child of this node
        """
        for idx, candidate in enumerate(self.get_children()):
            if candidate is child:
                return idx
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def is_root(self) -> bool:
        """Check if this node is its tree's root."""
        return self.get_tree().get_root() is self

    def is_descendant(self, ancestor: 'TreeNode') -> bool:
        """Check if this node lies in the subtree rooted at ancestor.

        A node counts as a descendant of itself.
        """
        current: Optional[TreeNode] = self
        while current is not None:
            if current is ancestor:
                return True
            current = current.get_parent()
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get_id()!r})"


class Tree(ABC):
    """Abstract base class for trees of TreeNodes."""

    @abstractmethod
    def get_id(self) -> Hashable:
        """Get the tree identity."""
        pass

    @abstractmethod
    def new_serial(self) -> int:
        """Allocate a fresh node identity."""
        pass

    @abstractmethod
    def get_root(self) -> Optional[TreeNode]:
        """Get the root node, if one has been created."""
        pass

    @abstractmethod
    def add_manager(self, manager: Any) -> None:
        """Register a TreeManager to receive lifecycle notifications."""
        pass

    @abstractmethod
    async def create_node(self, node_id: Hashable, is_root: bool = False) -> TreeNode:
        """Create a parentless node (the root when is_root is True).

        Managers' creating_node hooks are awaited before this returns.
        """
        pass

    @abstractmethod
    async def destroy_node(self, node: TreeNode) -> None:
        """Destroy a node that has neither parent nor children.

        Managers' destroying_node hooks are awaited before the node is removed.
        """
        pass
