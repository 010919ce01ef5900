#!/usr/bin/env python3
"""
Basic editing session showing how treesync keeps a view in step with a tree.

This example demonstrates:
- Building an outline through the editor
- Queued structural edits (move, reparent, kill)
- Simulated clicks on the headless surface
- Inspecting what is rendered
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treesync.config import EditorConfig
from treesync.aio import (
    NodeAction,
    open_editor,
    settle,
    build_outline,
    outline_of,
)


def show(title, editor, root):
    """Print the logical tree next to what the surface renders."""
    print(f"\n{title}")
    print("-" * 50)
    print(f"  Tree:     {outline_of(root)}")
    print(f"  Rendered: {editor.surface.outline()}")


async def main():
    """Run a short editing session."""
    editor, tree, root = await open_editor(tree_id="doc", config=EditorConfig.quiet())

    # Two sections, the first with two items
    section_a, item_1, item_2, section_b = await build_outline(editor, root, [[[], []], []])
    show("Initial outline", editor, root)

    # Edits are queued and applied one at a time
    editor.move_up(item_2)
    editor.move_down(section_a)
    await settle(editor)
    show("After moving item 2 up and section A down", editor, root)

    # Reparenting is a two-click gesture on the rendered elements
    surface = editor.surface
    surface.click(editor.compute_element_id(item_1), NodeAction.REPARENT)
    print(f"\nReparent armed: {surface.reparent_targets_active}")
    surface.click(editor.compute_element_id(section_b), NodeAction.REPARENT)
    await settle(editor)
    show("After moving item 1 under section B", editor, root)

    # Expansion state persists while nodes are hidden
    editor.toggle_children(section_b)
    surface.click(editor.compute_element_id(section_a), NodeAction.KILL_SUBTREE)
    await settle(editor)
    show("After collapsing section B and deleting section A", editor, root)

    element_id = editor.compute_element_id(section_b)
    print(f"\nSection B children shown: {surface.is_region_shown(element_id, 'children')}")
    print(f"Nodes alive: {len(tree)}")

    stats = editor.op_queue.stats
    print(f"\nQueue: {stats['enqueued']} enqueued, {stats['completed']} completed, "
          f"{stats['failed']} failed")


if __name__ == "__main__":
    print("treesync - Basic Editing Example")
    print("=" * 50)
    asyncio.run(main())
