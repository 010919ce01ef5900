"""Edit-synchronization engine.

The EditorManager observes a tree model's lifecycle notifications, keeps a
per-node NodeState describing whether the node is rendered, and drives the
rendering surface accordingly. Every structural edit it performs goes
through an OpQueue, one operation at a time, so that each edit and all the
lifecycle callbacks it triggers settle before the next edit starts.

Moves are always two queued steps: detach, then reattach. The detach step
enqueues the reattach step, so anything queued by the detach's callbacks
runs before the node is attached again.
"""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..config import EditorConfig
from .core import (
    TreeNode,
    TreeManager,
    RenderingSurface,
    NodeAction,
    CHILDREN_REGION,
    PANEL_REGION,
    region_id,
)
from .errors import ConfigurationError, LifecycleDesyncError
from .error_policies import create_error_policy
from .op_queue import OpQueue

logger = logging.getLogger(__name__)


@dataclass
class NodeState:
    """Synchronization state of one live node."""
    visible: bool = False
    children_open: bool = True
    panel_open: bool = True


class GesturePhase(Enum):
    """Phases of the two-click reparenting gesture."""
    IDLE = "idle"     # No node picked
    ARMED = "armed"   # Source picked, waiting for a destination


@dataclass(frozen=True)
class ReparentGesture:
    """Current reparenting gesture; ARMED always carries its source."""
    phase: GesturePhase = GesturePhase.IDLE
    source: Optional[TreeNode] = None

    @classmethod
    def armed(cls, source: TreeNode) -> 'ReparentGesture':
        return cls(GesturePhase.ARMED, source)

    @property
    def is_armed(self) -> bool:
        return self.phase is GesturePhase.ARMED


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise LifecycleDesyncError(message)


class EditorManager(TreeManager):
    """Keeps a rendering surface synchronized with a tree and serializes edits.

    Register the editor as a manager of the tree before creating the root,
    so that it sees every node from creation on.

    Example:
        surface = MemorySurface()
        editor = EditorManager(surface)
        tree = MemoryTree("outline", managers=[editor])
        root = await tree.create_node(tree.new_serial(), is_root=True)
        editor.create_child(root)
        await editor.op_queue.join()
    """

    def __init__(self, surface: RenderingSurface, op_queue: Optional[OpQueue] = None,
                 config: Optional[EditorConfig] = None):
        """Initialize the editor.

        Args:
            surface: Rendering surface to drive; receives a back-reference
            op_queue: Queue for structural edits (built from config if None)
            config: Editor configuration

        Raises:
            ConfigurationError: if config does not validate
        """
        super().__init__()
        self.config = config or EditorConfig()

        # Validate configuration
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {', '.join(errors)}")

        if op_queue is None:
            op_queue = OpQueue(create_error_policy(
                verbose=self.config.verbose_errors,
                on_error=self.config.on_error,
            ))
        self.op_queue = op_queue
        self.surface = surface
        self.gesture = ReparentGesture()
        # Nodes detached by a move or reparent and not attached again
        self.stranded: List[TreeNode] = []
        self.surface.set_editor_manager(self)

    # Element naming

    def compute_element_id(self, node: TreeNode) -> str:
        return self.config.element_id(node.get_tree().get_id(), node.get_id())

    def state_of(self, node: TreeNode) -> NodeState:
        return self.get_manager_object(node)

    def is_visible(self, node: TreeNode) -> bool:
        return self.get_manager_object(node).visible

    # Lifecycle hooks

    async def creating_node(self, node: TreeNode) -> None:
        obj = NodeState(children_open=self.config.children_open,
                        panel_open=self.config.panel_open)
        self.set_manager_object(node, obj)
        if node.is_root():
            # The root never gets an attach notification
            obj.visible = True
            self.surface.mount_root(self.compute_element_id(node))

    async def destroying_node(self, node: TreeNode) -> None:
        obj: NodeState = self.get_manager_object(node)
        if node.is_root():
            _require(obj.visible, f"root {node!r} destroyed while not visible")
            obj.visible = False
            self.surface.unmount_root(self.compute_element_id(node))
        self.release_manager_object(node)
        self._unstrand(node)

    def after_reparenting(self, parent: TreeNode, child: TreeNode, idx: int) -> None:
        parent_obj: NodeState = self.get_manager_object(parent)
        child_obj: NodeState = self.get_manager_object(child)
        _require(not child_obj.visible, f"{child!r} attached while already visible")
        self._unstrand(child)
        if parent_obj.visible:
            self.make_subtree_visible(parent, child, idx)

    def before_orphaning(self, parent: TreeNode, child: TreeNode, idx: int) -> None:
        parent_obj: NodeState = self.get_manager_object(parent)
        child_obj: NodeState = self.get_manager_object(child)
        _require(parent_obj.visible == child_obj.visible,
                 f"{child!r} visible={child_obj.visible} under {parent!r} visible={parent_obj.visible}")
        if child_obj.visible:
            self.make_subtree_hidden(child)
        self.surface.remove_element(self.compute_element_id(child))

    # Materialization

    def make_subtree_visible(self, parent: TreeNode, child: TreeNode, idx: int) -> None:
        """Render child (now at position idx under a visible parent) and its subtree."""
        parent_obj: NodeState = self.get_manager_object(parent)
        child_obj: NodeState = self.get_manager_object(child)
        _require(not child_obj.visible, f"{child!r} is already visible")
        _require(parent_obj.visible, f"parent {parent!r} is not visible")

        child_obj.visible = True

        child_id = self.compute_element_id(child)
        container_id = region_id(self.compute_element_id(parent), CHILDREN_REGION)
        if idx == 0:
            self.surface.insert_element(child_id, container_id)
        else:
            previous_id = self.compute_element_id(parent.get_child(idx - 1))
            self.surface.insert_element(child_id, container_id, after_id=previous_id)

        # Toggle twice so the rendered state matches the flag whatever the default
        if child_obj.children_open:
            self.close_children(child, False)
            self.open_children(child, False)
        else:
            self.open_children(child, False)
            self.close_children(child, False)
        if child_obj.panel_open:
            self.close_panel(child, False)
            self.open_panel(child, False)
        else:
            self.open_panel(child, False)
            self.close_panel(child, False)

        handlers = {
            NodeAction.TOGGLE_CHILDREN: self.toggle_children,
            NodeAction.TOGGLE_PANEL: self.toggle_panel,
            NodeAction.COLLAPSE_ALL: self.collapse_all_descendants,
            NodeAction.CREATE_CHILD: self.create_child,
            NodeAction.KILL_SUBTREE: self.kill_subtree,
            NodeAction.MOVE_UP: self.move_up,
            NodeAction.MOVE_DOWN: self.move_down,
            NodeAction.REPARENT: self.reparent,
        }
        for action, handler in handlers.items():
            self.surface.bind(child_id, action, functools.partial(handler, child))
        self.surface.render_node_content(child)

        for idx2, child2 in enumerate(child.get_children()):
            self.make_subtree_visible(child, child2, idx2)

    def make_subtree_hidden(self, node: TreeNode) -> None:
        """Mark node and its subtree hidden; removing the element is the caller's job."""
        obj: NodeState = self.get_manager_object(node)
        _require(obj.visible, f"{node!r} is already hidden")
        obj.visible = False
        for child in node.get_children():
            self.make_subtree_hidden(child)

    # Expansion toggles

    def _toggle(self, node: TreeNode, region: str, animation: Optional[bool]) -> None:
        obj: NodeState = self.get_manager_object(node)
        attr = 'children_open' if region == CHILDREN_REGION else 'panel_open'
        is_open = not getattr(obj, attr)
        setattr(obj, attr, is_open)
        if not obj.visible:
            return
        if animation is None:
            animation = self.config.animate
        element_id = self.compute_element_id(node)
        self.surface.set_toggle_state(element_id, region, is_open)
        self.surface.show_region(region_id(element_id, region), is_open, animation)

    def toggle_children(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        """Flip node's children region; animation defaults to config.animate."""
        self._toggle(node, CHILDREN_REGION, animation)

    def open_children(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        if not self.get_manager_object(node).children_open:
            self.toggle_children(node, animation)

    def close_children(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        if self.get_manager_object(node).children_open:
            self.toggle_children(node, animation)

    def toggle_panel(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        """Flip node's secondary panel; animation defaults to config.animate."""
        self._toggle(node, PANEL_REGION, animation)

    def open_panel(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        if not self.get_manager_object(node).panel_open:
            self.toggle_panel(node, animation)

    def close_panel(self, node: TreeNode, animation: Optional[bool] = None) -> None:
        if self.get_manager_object(node).panel_open:
            self.toggle_panel(node, animation)

    def collapse_all_descendants(self, node: TreeNode) -> None:
        """Open node's children region and close each child's."""
        self.open_children(node)
        for child in node.get_children():
            self.close_children(child)

    toggle_children_region = toggle_children
    toggle_secondary_panel = toggle_panel

    # Structural operations

    def create_child(self, node: TreeNode) -> None:
        """Queue creation of a new last child of node."""
        self.reparent(None)
        tree = node.get_tree()
        serial = tree.new_serial()

        async def create() -> None:
            if node.destroyed:
                logger.debug("create_child: parent %r destroyed, skipping", node)
                return
            child = await tree.create_node(serial, is_root=False)
            child.reparent(node, -1)

        self.op_queue.enqueue_operation(create, name='create_child', node=node)

    def kill_subtree(self, node: TreeNode) -> None:
        """Queue destruction of node and all of its descendants."""
        self.reparent(None)

        async def kill() -> None:
            if node.destroyed:
                logger.debug("kill_subtree: %r already destroyed, skipping", node)
                return
            await self._kill(node)

        self.op_queue.enqueue_operation(kill, name='kill_subtree', node=node)

    async def _kill(self, node: TreeNode) -> None:
        # A node must have neither children nor parent when destroyed
        for child in list(node.get_children()):
            await self._kill(child)
        if node.get_parent() is not None:
            node.orphan()
        await node.get_tree().destroy_node(node)

    def move(self, node: TreeNode, up: bool) -> None:
        """Queue a one-position shift of node among its siblings.

        Shifting the first child up, the last child down, or the root is a
        no-op and enqueues nothing.
        """
        self.reparent(None)
        parent = node.get_parent()
        if parent is None:
            return
        idx = parent.find_child_idx(node)
        new_idx = idx + (-1 if up else 1)
        if not 0 <= new_idx < len(parent.get_children()):
            return

        async def reattach() -> None:
            if node.destroyed:
                return
            # Siblings may have been removed by edits queued in between
            node.reparent(parent, min(new_idx, len(parent.get_children())))

        async def detach() -> None:
            if node.destroyed or node.get_parent() is not parent:
                logger.debug("move: %r changed parent since queued, skipping", node)
                return
            node.orphan()
            self._strand(node)
            self.op_queue.enqueue_operation(reattach, name='move_reattach', node=node)

        self.op_queue.enqueue_operation(detach, name='move_detach', node=node)

    def move_up(self, node: TreeNode) -> None:
        self.move(node, True)

    def move_down(self, node: TreeNode) -> None:
        self.move(node, False)

    # Reparenting gesture

    def reparent(self, node: Optional[TreeNode]) -> None:
        """Advance the reparenting gesture.

        The first call with a node picks the source. The next call with a
        node picks the destination and, when the move is valid, queues it.
        A call with None cancels. The gesture is idle again afterwards,
        whether or not anything was queued.
        """
        gesture = self.gesture
        if not gesture.is_armed:
            if node is not None:
                logger.debug("reparent: armed with %r", node)
                self.gesture = ReparentGesture.armed(node)
                self.surface.set_reparent_targets_active(True)
                return
        elif node is not None:
            self._confirm_reparent(gesture.source, node)

        self.surface.set_reparent_targets_active(False)
        self.gesture = ReparentGesture()

    begin_or_confirm_reparent = reparent

    def cancel_reparent(self) -> None:
        self.reparent(None)

    @staticmethod
    def _reparent_allowed(source: TreeNode, destination: TreeNode) -> bool:
        # is_descendant covers destination is source
        return (not source.destroyed
                and not destination.destroyed
                and not destination.is_descendant(source))

    def _confirm_reparent(self, source: TreeNode, destination: TreeNode) -> None:
        if not self._reparent_allowed(source, destination):
            logger.debug("reparent: rejected %r -> %r", source, destination)
            return

        async def reattach() -> None:
            if source.destroyed:
                return
            source.reparent(destination, -1)

        async def detach() -> None:
            if not self._reparent_allowed(source, destination):
                logger.debug("reparent: %r -> %r no longer valid, skipping", source, destination)
                return
            # A stranded source has no parent left to leave
            if source.get_parent() is not None:
                source.orphan()
                self._strand(source)
            self.op_queue.enqueue_operation(reattach, name='reparent_attach', node=source)

        self.op_queue.enqueue_operation(detach, name='reparent_detach', node=source)

    # Stranded nodes

    def _strand(self, node: TreeNode) -> None:
        if node not in self.stranded:
            self.stranded.append(node)

    def _unstrand(self, node: TreeNode) -> None:
        if node in self.stranded:
            self.stranded.remove(node)

    def __repr__(self) -> str:
        return (f"EditorManager(states={self.manager_object_count()}, "
                f"gesture={self.gesture.phase.value}, queue={self.op_queue!r})")
