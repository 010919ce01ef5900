"""Testing utilities for treesync consumers."""

from .fixtures import EditorTestHelper

__all__ = ['EditorTestHelper']
