"""In-memory tree model.

Reference implementation of the Tree / TreeNode interfaces. Nodes live in a
dict keyed by identity; every structural change is bracketed by the
registered managers' lifecycle hooks.
"""

import asyncio
import itertools
from typing import Dict, Hashable, Iterable, List, Optional, Sequence

from ..core import Tree, TreeNode, TreeManager
from ..errors import TreeStructureError


class MemoryTreeNode(TreeNode):
    """Node of a MemoryTree.

    Created only through MemoryTree.create_node().
    """

    def __init__(self, tree: 'MemoryTree', node_id: Hashable):
        self._tree = tree
        self._id = node_id
        self._parent: Optional[MemoryTreeNode] = None
        self.children: List[MemoryTreeNode] = []
        self._destroyed = False

    def get_tree(self) -> 'MemoryTree':
        return self._tree

    def get_id(self) -> Hashable:
        return self._id

    def get_parent(self) -> Optional['MemoryTreeNode']:
        return self._parent

    def get_children(self) -> Sequence['MemoryTreeNode']:
        return self.children

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def orphan(self) -> None:
        """Detach from the parent, notifying managers first.

        Raises:
            TreeStructureError: if the node has no parent
        """
        parent = self._parent
        if parent is None:
            raise TreeStructureError(f"{self!r} has no parent to be orphaned from")
        idx = parent.find_child_idx(self)
        for manager in self._tree.managers:
            manager.before_orphaning(parent, self, idx)
        del parent.children[idx]
        self._parent = None

    def reparent(self, parent: TreeNode, idx: int = -1) -> None:
        """Attach under parent at idx (-1 appends), then notify managers.

        Raises:
            TreeStructureError: on double parenting, cross-tree links,
                destroyed endpoints, cycles or a bad index
        """
        if self._parent is not None:
            raise TreeStructureError(f"{self!r} already has parent {self._parent!r}")
        if self._destroyed or parent.destroyed:
            raise TreeStructureError(f"cannot attach {self!r} to {parent!r}: destroyed node")
        if parent.get_tree() is not self._tree:
            raise TreeStructureError(f"{parent!r} belongs to a different tree")
        if self.is_root():
            raise TreeStructureError("the root cannot be attached to a parent")
        if parent.is_descendant(self):
            raise TreeStructureError(f"attaching {self!r} under {parent!r} would create a cycle")

        children = parent.children
        if idx == -1:
            idx = len(children)
        if not 0 <= idx <= len(children):
            raise TreeStructureError(f"index {idx} out of range for {len(children)} children")

        children.insert(idx, self)
        self._parent = parent
        for manager in self._tree.managers:
            manager.after_reparenting(parent, self, idx)


class MemoryTree(Tree):
    """In-memory tree with per-tree serial allocation starting at 0."""

    def __init__(self, tree_id: Hashable = "tree", managers: Optional[Iterable[TreeManager]] = None):
        """Initialize an empty tree.

        Args:
            tree_id: Tree identity, used to namespace element ids
            managers: Lifecycle observers, notified in registration order
        """
        self._id = tree_id
        self.managers: List[TreeManager] = list(managers or [])
        self.nodes: Dict[Hashable, MemoryTreeNode] = {}
        self._root: Optional[MemoryTreeNode] = None
        self._serials = itertools.count()

    def get_id(self) -> Hashable:
        return self._id

    def new_serial(self) -> int:
        return next(self._serials)

    def get_root(self) -> Optional[MemoryTreeNode]:
        return self._root

    def add_manager(self, manager: TreeManager) -> None:
        self.managers.append(manager)

    def get_node(self, node_id: Hashable) -> MemoryTreeNode:
        """Look up a live node.

        Raises:
            KeyError: if no live node has node_id
        """
        return self.nodes[node_id]

    async def create_node(self, node_id: Hashable, is_root: bool = False) -> MemoryTreeNode:
        """Create a parentless node and await every manager's creating_node.

        Raises:
            TreeStructureError: on a duplicate identity or a second root
        """
        if node_id in self.nodes:
            raise TreeStructureError(f"node {node_id!r} already exists in tree {self._id!r}")
        if is_root and self._root is not None:
            raise TreeStructureError(f"tree {self._id!r} already has a root")

        # Creation is a suspension point
        await asyncio.sleep(0)

        node = MemoryTreeNode(self, node_id)
        self.nodes[node_id] = node
        if is_root:
            self._root = node
        for manager in self.managers:
            await manager.creating_node(node)
        return node

    async def destroy_node(self, node: TreeNode) -> None:
        """Destroy a node with neither parent nor children.

        Raises:
            TreeStructureError: if the precondition does not hold
        """
        if node.destroyed or self.nodes.get(node.get_id()) is not node:
            raise TreeStructureError(f"{node!r} is not a live node of tree {self._id!r}")
        if node.get_parent() is not None:
            raise TreeStructureError(f"{node!r} must be orphaned before being destroyed")
        if node.get_children():
            raise TreeStructureError(f"{node!r} still has children")

        await asyncio.sleep(0)

        for manager in self.managers:
            await manager.destroying_node(node)
        del self.nodes[node.get_id()]
        node._destroyed = True
        if node is self._root:
            self._root = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"MemoryTree({self._id!r}, nodes={len(self.nodes)})"
