"""High-level async API for treesync.

This module provides simple, user-friendly async functions for setting up
an editor over an in-memory tree and for building and inspecting outlines.
"""

from typing import Any, Hashable, List, Optional, Sequence, Tuple

from ..config import EditorConfig
from .core import RenderingSurface, TreeNode
from .adapters import MemoryTree, MemorySurface
from .editor import EditorManager
from .op_queue import OpQueue


async def open_editor(
    surface: Optional[RenderingSurface] = None,
    tree_id: Hashable = "tree",
    config: Optional[EditorConfig] = None,
    queue: Optional[OpQueue] = None
) -> Tuple[EditorManager, MemoryTree, TreeNode]:
    """Create an editor, an in-memory tree it observes, and the tree's root.

    Args:
        surface: Rendering surface (a MemorySurface if None)
        tree_id: Identity of the new tree
        config: Editor configuration
        queue: Operation queue (created by the editor if None)

    Returns:
        Tuple of (editor, tree, root); the root is already rendered

    Example:
        >>> editor, tree, root = await open_editor()
        >>> editor.create_child(root)
        >>> await settle(editor)
    """
    editor = EditorManager(surface or MemorySurface(), op_queue=queue, config=config)
    tree = MemoryTree(tree_id, managers=[editor])
    root = await tree.create_node(tree.new_serial(), is_root=True)
    return editor, tree, root


async def settle(editor: EditorManager) -> None:
    """Wait until every structural edit queued on editor has completed."""
    await editor.op_queue.join()


async def build_outline(editor: EditorManager, parent: TreeNode, outline: Sequence[Any]) -> List[TreeNode]:
    """Create a nested outline of new nodes under parent.

    The outline is a list with one entry per child to create; each entry
    is itself the outline of that child's children. For example
    ``[[], [[], []]]`` creates two children, the second with two children
    of its own. Every node is created through editor.create_child.

    Args:
        editor: Editor performing the edits
        parent: Node receiving the outline as new last children
        outline: Nested lists describing the shape to create

    Returns:
        Created nodes in pre-order
    """
    created = []
    for sub_outline in outline:
        editor.create_child(parent)
        await settle(editor)
        child = parent.get_children()[-1]
        created.append(child)
        created.extend(await build_outline(editor, child, sub_outline))
    return created


def outline_of(node: TreeNode) -> list:
    """Describe node's subtree as nested [id, [children...]] lists."""
    return [node.get_id(), [outline_of(child) for child in node.get_children()]]
