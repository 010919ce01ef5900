"""Headless rendering surface.

MemorySurface keeps a small element registry instead of drawing anything:
which elements exist, in which container and order, which regions are
shown, which handlers are bound. It is the surface used by the test suite
and by applications that render elsewhere from this model.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional

from ..core import (
    RenderingSurface,
    TreeNode,
    NodeAction,
    CHILDREN_REGION,
    PANEL_REGION,
    region_id,
)
from ..errors import LifecycleDesyncError


@dataclass
class SurfaceElement:
    """One node element held by a MemorySurface."""
    element_id: str
    container_id: Optional[str]
    toggles: Dict[str, bool] = field(default_factory=dict)
    handlers: Dict[NodeAction, Callable[[], None]] = field(default_factory=dict)


class MemorySurface(RenderingSurface):
    """In-memory RenderingSurface.

    New elements start with their children region shown and their panel
    hidden. Commands addressing unknown ids are ignored.
    """

    def __init__(self):
        self.editor_manager = None
        self.root_id: Optional[str] = None
        self.elements: Dict[str, SurfaceElement] = {}
        self.containers: Dict[str, List[str]] = {}
        self.regions: Dict[str, bool] = {}
        self.painted: List[Hashable] = []
        self.reparent_targets_active = False
        self.animations = 0

    def _clear(self) -> None:
        self.root_id = None
        self.elements.clear()
        self.containers.clear()
        self.regions.clear()

    def _add_element(self, element_id: str, container_id: Optional[str]) -> SurfaceElement:
        if element_id in self.elements:
            raise LifecycleDesyncError(f"element {element_id!r} is already rendered")
        element = SurfaceElement(element_id, container_id)
        self.elements[element_id] = element
        children_region = region_id(element_id, CHILDREN_REGION)
        self.containers[children_region] = []
        self.regions[children_region] = True
        self.regions[region_id(element_id, PANEL_REGION)] = False
        return element

    # RenderingSurface interface

    def render_node_content(self, node: TreeNode) -> None:
        self.painted.append(node.get_id())

    def mount_root(self, element_id: str) -> None:
        self._clear()
        self._add_element(element_id, None)
        self.root_id = element_id

    def unmount_root(self, element_id: str) -> None:
        if self.root_id == element_id:
            self._clear()

    def insert_element(self, element_id: str, container_id: str,
                       after_id: Optional[str] = None) -> None:
        if after_id is None:
            if container_id not in self.containers:
                return
            self._add_element(element_id, container_id)
            self.containers[container_id].insert(0, element_id)
            return

        after = self.elements.get(after_id)
        if after is None or after.container_id is None:
            return
        siblings = self.containers[after.container_id]
        position = siblings.index(after_id) + 1
        self._add_element(element_id, after.container_id)
        siblings.insert(position, element_id)

    def remove_element(self, element_id: str) -> None:
        element = self.elements.get(element_id)
        if element is None:
            return
        if element.container_id is not None:
            self.containers[element.container_id].remove(element_id)
        self._drop(element_id)

    def _drop(self, element_id: str) -> None:
        """Forget an element and, recursively, everything inside it."""
        children_region = region_id(element_id, CHILDREN_REGION)
        for child_id in self.containers.pop(children_region, []):
            self._drop(child_id)
        self.regions.pop(children_region, None)
        self.regions.pop(region_id(element_id, PANEL_REGION), None)
        del self.elements[element_id]

    def show_region(self, target_id: str, shown: bool, animate: bool) -> None:
        if target_id not in self.regions:
            return
        self.regions[target_id] = shown
        if animate:
            self.animations += 1

    def set_toggle_state(self, element_id: str, region: str, open: bool) -> None:
        element = self.elements.get(element_id)
        if element is not None:
            element.toggles[region] = open

    def bind(self, element_id: str, action: NodeAction, handler: Callable[[], None]) -> None:
        element = self.elements.get(element_id)
        if element is not None:
            element.handlers[action] = handler

    def set_reparent_targets_active(self, active: bool) -> None:
        self.reparent_targets_active = active

    # Inspection and simulated interaction

    def click(self, element_id: str, action: NodeAction) -> None:
        """Invoke the handler bound for action on element_id.

        Raises:
            KeyError: if the element or the binding does not exist
        """
        self.elements[element_id].handlers[action]()

    def has_element(self, element_id: str) -> bool:
        return element_id in self.elements

    def rendered_children(self, element_id: str) -> List[str]:
        """Ordered ids of the elements inside element_id's children region."""
        return list(self.containers.get(region_id(element_id, CHILDREN_REGION), []))

    def is_region_shown(self, element_id: str, region: str) -> Optional[bool]:
        """Shown state of a region, or None when the element does not exist."""
        return self.regions.get(region_id(element_id, region))

    def toggle_state(self, element_id: str, region: str) -> Optional[bool]:
        element = self.elements.get(element_id)
        if element is None:
            return None
        return element.toggles.get(region)

    def outline(self, element_id: Optional[str] = None) -> list:
        """Nested [element_id, [children...]] view of what is rendered."""
        if element_id is None:
            element_id = self.root_id
            if element_id is None:
                return []
        return [element_id, [self.outline(child) for child in self.rendered_children(element_id)]]

    def __repr__(self) -> str:
        return f"MemorySurface(root={self.root_id!r}, elements={len(self.elements)})"
