"""Core abstractions for tree edit synchronization.

This module defines the interfaces between the editor and its external
collaborators: the tree model and the rendering surface.
"""

from .node import TreeNode, Tree
from .manager import TreeManager
from .surface import (
    RenderingSurface,
    NodeAction,
    CHILDREN_REGION,
    PANEL_REGION,
    region_id,
)

__all__ = [
    # Tree model
    'TreeNode',
    'Tree',
    # Lifecycle observer
    'TreeManager',
    # Rendering surface
    'RenderingSurface',
    'NodeAction',
    'CHILDREN_REGION',
    'PANEL_REGION',
    'region_id',
]
