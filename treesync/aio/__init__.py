"""Asynchronous implementation of treesync.

This package contains the asyncio edit-synchronization engine, its
operation queue, the collaborator interfaces and in-memory reference
collaborators.
"""

# Core abstractions
from .core import (
    TreeNode,
    Tree,
    TreeManager,
    RenderingSurface,
    NodeAction,
    CHILDREN_REGION,
    PANEL_REGION,
    region_id,
)

# Reference collaborators
from .adapters import (
    MemoryTree,
    MemoryTreeNode,
    MemorySurface,
    SurfaceElement,
)

# Serialized execution
from .op_queue import OpQueue, QueuedOperation

# Error handling
from .errors import (
    TreeSyncError,
    LifecycleDesyncError,
    TreeStructureError,
    ConfigurationError,
)
from .error_policies import (
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    CallbackPolicy,
    create_error_policy,
)

# Synchronization engine
from .editor import (
    EditorManager,
    NodeState,
    GesturePhase,
    ReparentGesture,
)

# High-level API
from .api import (
    open_editor,
    settle,
    build_outline,
    outline_of,
)

__all__ = [
    # Core abstractions
    'TreeNode',
    'Tree',
    'TreeManager',
    'RenderingSurface',
    'NodeAction',
    'CHILDREN_REGION',
    'PANEL_REGION',
    'region_id',
    # Reference collaborators
    'MemoryTree',
    'MemoryTreeNode',
    'MemorySurface',
    'SurfaceElement',
    # Queue
    'OpQueue',
    'QueuedOperation',
    # Errors
    'TreeSyncError',
    'LifecycleDesyncError',
    'TreeStructureError',
    'ConfigurationError',
    'ErrorPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'CallbackPolicy',
    'create_error_policy',
    # Engine
    'EditorManager',
    'NodeState',
    'GesturePhase',
    'ReparentGesture',
    # High-level API
    'open_editor',
    'settle',
    'build_outline',
    'outline_of',
]
