"""Rendering surface abstraction.

The rendering surface turns editor commands into something the user sees.
The editor addresses elements by string ids: each node has one element,
and each element owns two regions, its children container and its
secondary panel, addressed by region_id(element_id, region).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from .node import TreeNode

CHILDREN_REGION = "children"
PANEL_REGION = "panel"


def region_id(element_id: str, region: str) -> str:
    """Compose the id of one of an element's regions."""
    return f"{element_id}_{region}"


class NodeAction(Enum):
    """Interaction handlers bound on every materialized node."""
    TOGGLE_CHILDREN = "toggle_children"
    TOGGLE_PANEL = "toggle_panel"
    COLLAPSE_ALL = "collapse_all"
    CREATE_CHILD = "create"
    KILL_SUBTREE = "kill"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    REPARENT = "reparent"


class RenderingSurface(ABC):
    """Abstract base class for rendering surfaces.

    Implementations must tolerate commands addressing ids they do not
    know about (treating them as no-ops), the same way a DOM selector
    matching nothing does.
    """

    def set_editor_manager(self, editor_manager: Any) -> None:
        """Receive the back-reference to the editor driving this surface."""
        self.editor_manager = editor_manager

    @abstractmethod
    def render_node_content(self, node: TreeNode) -> None:
        """Paint node's own content into its freshly inserted element."""
        pass

    @abstractmethod
    def mount_root(self, element_id: str) -> None:
        """Replace the surface contents with an empty root element."""
        pass

    @abstractmethod
    def unmount_root(self, element_id: str) -> None:
        """Remove the root element and everything below it."""
        pass

    @abstractmethod
    def insert_element(self, element_id: str, container_id: str,
                       after_id: Optional[str] = None) -> None:
        """Create a node element.

        With after_id None the element goes to the front of container_id;
        otherwise it goes immediately after the element after_id.
        """
        pass

    @abstractmethod
    def remove_element(self, element_id: str) -> None:
        """Remove an element together with everything inside it."""
        pass

    @abstractmethod
    def show_region(self, target_id: str, shown: bool, animate: bool) -> None:
        """Show or hide one region of an element."""
        pass

    @abstractmethod
    def set_toggle_state(self, element_id: str, region: str, open: bool) -> None:
        """Update the open/closed look of the button toggling region."""
        pass

    @abstractmethod
    def bind(self, element_id: str, action: NodeAction, handler: Callable[[], None]) -> None:
        """Bind handler to the element's control for action."""
        pass

    @abstractmethod
    def set_reparent_targets_active(self, active: bool) -> None:
        """Mark (or unmark) every reparent control as a drop target."""
        pass
