"""treesync - Tree Edit Synchronization Library.

treesync keeps a rendered, interactive view of a mutable tree in step with
the tree itself, and serializes structural edits (create, delete, reorder,
reparent) so rapid or overlapping user actions cannot corrupt either.

Getting started:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treesync.aio import open_editor, settle

    editor, tree, root = await open_editor()
    editor.create_child(root)
    await settle(editor)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from . import aio
from .config import EditorConfig

__all__ = [
    "__version__",
    "aio",
    "EditorConfig",
]
