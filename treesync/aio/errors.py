"""Exception taxonomy for treesync.

Invariant violations are programming-contract breaches and are raised
loudly. Operation failures are isolated by the operation queue's error
policy and never reach the caller of a public operation.
"""


class TreeSyncError(Exception):
    """Base class for all treesync errors."""


class LifecycleDesyncError(TreeSyncError, AssertionError):
    """Visibility state disagrees with the lifecycle notification being handled.

    Raised when, for example, a node expected to be hidden is found visible.
    This indicates a bug in the tree model or the editor, not a recoverable
    runtime condition.
    """


class TreeStructureError(TreeSyncError, ValueError):
    """A tree-model precondition was violated (bad index, double parent, ...)."""


class ConfigurationError(TreeSyncError, ValueError):
    """An EditorConfig failed validation."""
