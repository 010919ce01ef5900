"""Reference collaborators for the editor.

These adapters implement the tree-model and rendering-surface interfaces
in memory, for tests and for applications that keep their own renderer.
"""

from .memory_tree import MemoryTree, MemoryTreeNode
from .memory_surface import MemorySurface, SurfaceElement

__all__ = [
    'MemoryTree',
    'MemoryTreeNode',
    'MemorySurface',
    'SurfaceElement',
]
