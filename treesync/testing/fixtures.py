"""Test fixtures for treesync consumers.

These fixtures provide controlled access to an editor's synchronization
state for testing purposes without exposing it as part of the public API.
"""

from typing import Dict, Hashable, List

from ..aio.core import TreeNode
from ..aio.editor import EditorManager


class EditorTestHelper:
    """Public test fixture for synchronization checks.

    Example:
        editor, tree, root = await open_editor()
        helper = EditorTestHelper(editor)
        ...
        await settle(editor)
        assert helper.check_visibility_invariant(root) == []
        assert helper.rendered_order(root) == helper.logical_order(root)
    """

    def __init__(self, editor: EditorManager):
        """Initialize with the editor under test.

        Args:
            editor: The EditorManager whose state is inspected
        """
        self._editor = editor

    def visibility_snapshot(self, root: TreeNode) -> Dict[Hashable, bool]:
        """Map every node id in root's subtree to its visible flag."""
        snapshot = {root.get_id(): self._editor.is_visible(root)}
        for child in root.get_children():
            snapshot.update(self.visibility_snapshot(child))
        return snapshot

    def check_visibility_invariant(self, root: TreeNode) -> List[str]:
        """Find nodes whose visible flag differs from their parent's.

        Only meaningful while the editor's queue is idle.

        Returns:
            List of violation descriptions (empty if consistent)
        """
        violations = []
        parent_visible = self._editor.is_visible(root)
        for child in root.get_children():
            child_visible = self._editor.is_visible(child)
            if child_visible != parent_visible:
                violations.append(
                    f"{child!r} visible={child_visible} under {root!r} visible={parent_visible}"
                )
            violations.extend(self.check_visibility_invariant(child))
        return violations

    def logical_order(self, root: TreeNode) -> List[str]:
        """Element ids of root's descendants in pre-order of the tree."""
        order = []
        for child in root.get_children():
            order.append(self._editor.compute_element_id(child))
            order.extend(self.logical_order(child))
        return order

    def rendered_order(self, root: TreeNode) -> List[str]:
        """Element ids rendered below root's element, in pre-order.

        Requires the editor's surface to offer rendered_children(), as
        MemorySurface does.
        """
        surface = self._editor.surface

        def walk(element_id: str) -> List[str]:
            order = []
            for child_id in surface.rendered_children(element_id):
                order.append(child_id)
                order.extend(walk(child_id))
            return order

        return walk(self._editor.compute_element_id(root))

    def state_count(self) -> int:
        """Number of live synchronization states held by the editor."""
        return self._editor.manager_object_count()
