"""Tests for queued structural operations: create, kill and move."""

import asyncio
import pytest
from unittest.mock import patch

from treesync.config import EditorConfig
from treesync.aio import (
    TreeManager,
    MemorySurface,
    NodeAction,
    CHILDREN_REGION,
    open_editor,
    settle,
    build_outline,
)
from treesync.testing import EditorTestHelper


class RecordingManager(TreeManager):
    """Second manager observing the same tree as the editor."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def creating_node(self, node):
        self.events.append(("create", node.get_id()))

    async def destroying_node(self, node):
        self.events.append(("destroy", node.get_id()))

    def after_reparenting(self, parent, child, idx):
        self.events.append(("attach", parent.get_id(), child.get_id(), idx))

    def before_orphaning(self, parent, child, idx):
        self.events.append(("orphan", parent.get_id(), child.get_id(), idx))


@pytest.fixture
def surface():
    return MemorySurface()


async def start(surface, outline=()):
    editor, tree, root = await open_editor(surface, tree_id="t", config=EditorConfig.quiet())
    nodes = await build_outline(editor, root, list(outline))
    recorder = RecordingManager()
    tree.add_manager(recorder)
    return editor, tree, root, nodes, recorder


def block(editor):
    """Hold the editor's queue until the returned event is set."""
    gate = asyncio.Event()
    editor.op_queue.enqueue_operation(gate.wait, name="gate")
    return gate


def errors_of(editor):
    return editor.op_queue.get_policy().errors


class TestCreateChild:
    """create_child queues creation plus attachment as last child."""

    @pytest.mark.asyncio
    async def test_serials_are_allocated_at_call_time(self, surface):
        editor, tree, root, _, recorder = await start(surface)

        editor.create_child(root)
        editor.create_child(root)
        await settle(editor)

        assert [child.get_id() for child in root.get_children()] == [1, 2]
        assert recorder.events == [
            ("create", 1), ("attach", 0, 1, 0),
            ("create", 2), ("attach", 0, 2, 1),
        ]

    @pytest.mark.asyncio
    async def test_create_under_killed_node_is_skipped(self, surface):
        editor, tree, root, (a,), recorder = await start(surface, [[]])

        editor.kill_subtree(a)
        editor.create_child(a)
        await settle(editor)

        assert root.get_children() == []
        assert list(tree.nodes) == [0]
        assert errors_of(editor) == []

    @pytest.mark.asyncio
    async def test_create_through_bound_handler(self, surface):
        editor, tree, root, (a,), _ = await start(surface, [[]])

        surface.click("t_step_1", NodeAction.CREATE_CHILD)
        await settle(editor)

        assert [child.get_id() for child in a.get_children()] == [2]
        assert surface.rendered_children("t_step_1") == ["t_step_2"]


class TestKillSubtree:
    """kill_subtree destroys depth-first, detaching each node first."""

    @pytest.mark.asyncio
    async def test_kill_destroys_descendants_first(self, surface):
        editor, tree, root, _, recorder = await start(surface)

        editor.create_child(root)
        await settle(editor)
        a = root.get_child(0)
        editor.create_child(a)
        await settle(editor)
        b = a.get_child(0)
        assert (a.get_id(), b.get_id()) == (1, 2)
        recorder.events.clear()

        editor.kill_subtree(a)
        await settle(editor)

        assert recorder.events == [
            ("orphan", 1, 2, 0), ("destroy", 2),
            ("orphan", 0, 1, 0), ("destroy", 1),
        ]
        assert root.get_children() == []
        assert a.destroyed and b.destroyed
        assert not editor.has_manager_object(a)
        assert not editor.has_manager_object(b)
        assert EditorTestHelper(editor).state_count() == 1
        assert surface.rendered_children("t_step_0") == []

    @pytest.mark.asyncio
    async def test_kill_wide_subtree(self, surface):
        editor, tree, root, nodes, recorder = await start(surface, [[[], [[]], []], []])

        editor.kill_subtree(nodes[0])
        await settle(editor)

        assert [child.get_id() for child in root.get_children()] == [nodes[-1].get_id()]
        assert len(tree) == 2
        assert surface.rendered_children("t_step_0") == [editor.compute_element_id(nodes[-1])]

    @pytest.mark.asyncio
    async def test_kill_twice_is_harmless(self, surface):
        editor, tree, root, (a,), _ = await start(surface, [[]])

        editor.kill_subtree(a)
        editor.kill_subtree(a)
        await settle(editor)

        assert a.destroyed
        assert errors_of(editor) == []


class TestMove:
    """move_up / move_down shift a node by one sibling position."""

    @pytest.mark.asyncio
    async def test_move_up_first_child_is_noop(self, surface):
        editor, tree, root, (a, b), recorder = await start(surface, [[], []])
        enqueued = editor.op_queue.stats['enqueued']

        editor.move_up(a)
        await settle(editor)

        assert editor.op_queue.stats['enqueued'] == enqueued
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_move_down_last_child_is_noop(self, surface):
        editor, tree, root, (a, b), recorder = await start(surface, [[], []])
        enqueued = editor.op_queue.stats['enqueued']

        editor.move_down(b)
        await settle(editor)

        assert editor.op_queue.stats['enqueued'] == enqueued
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_move_root_is_noop(self, surface):
        editor, tree, root, _, recorder = await start(surface)

        editor.move_down(root)
        await settle(editor)

        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_move_up_is_two_queued_steps(self, surface):
        editor, tree, root, (a, b, c), recorder = await start(surface, [[], [], []])
        enqueued = editor.op_queue.stats['enqueued']

        editor.move_up(b)
        await settle(editor)

        assert root.get_children() == [b, a, c]
        assert editor.op_queue.stats['enqueued'] == enqueued + 2
        assert recorder.events == [("orphan", 0, 2, 1), ("attach", 0, 2, 0)]
        helper = EditorTestHelper(editor)
        assert helper.rendered_order(root) == helper.logical_order(root)

    @pytest.mark.asyncio
    async def test_move_down(self, surface):
        editor, tree, root, (a, b, c), _ = await start(surface, [[], [], []])

        editor.move_down(a)
        await settle(editor)

        assert root.get_children() == [b, a, c]
        assert surface.rendered_children("t_step_0") == ["t_step_2", "t_step_1", "t_step_3"]

    @pytest.mark.asyncio
    async def test_move_keeps_subtree_and_expansion(self, surface):
        editor, tree, root, nodes, _ = await start(surface, [[[], []], []])
        a, a1, a2, b = nodes
        editor.toggle_children(a)

        editor.move_down(a)
        await settle(editor)

        assert root.get_children() == [b, a]
        assert a.get_children() == [a1, a2]
        assert editor.state_of(a).children_open is False
        assert surface.is_region_shown("t_step_1", CHILDREN_REGION) is False
        assert surface.rendered_children("t_step_1") == ["t_step_2", "t_step_3"]

    @pytest.mark.asyncio
    async def test_move_through_bound_handlers(self, surface):
        editor, tree, root, (a, b), _ = await start(surface, [[], []])

        surface.click("t_step_2", NodeAction.MOVE_UP)
        await settle(editor)

        assert root.get_children() == [b, a]

    @pytest.mark.asyncio
    async def test_rapid_edits_stay_consistent(self, surface):
        editor, tree, root, (a, b, c), _ = await start(surface, [[], [], []])
        helper = EditorTestHelper(editor)

        editor.move_up(c)
        editor.move_up(b)
        editor.kill_subtree(a)
        await settle(editor)

        assert root.get_children() == [b, c]
        assert editor.stranded == []
        assert errors_of(editor) == []
        assert helper.check_visibility_invariant(root) == []
        assert helper.rendered_order(root) == helper.logical_order(root)

    @pytest.mark.asyncio
    async def test_stale_move_is_skipped(self, surface):
        editor, tree, root, (a, b), _ = await start(surface, [[], []])
        gate = block(editor)

        editor.move_up(b)
        b.orphan()
        b.reparent(a)
        gate.set()
        await settle(editor)

        assert root.get_children() == [a]
        assert a.get_children() == [b]
        assert errors_of(editor) == []

    @pytest.mark.asyncio
    async def test_failed_reattach_leaves_node_stranded(self, surface):
        editor, tree, root, (a, b), _ = await start(surface, [[], []])
        helper = EditorTestHelper(editor)

        with patch.object(b, 'reparent', side_effect=RuntimeError("attach failed")):
            editor.move_up(b)
            await settle(editor)

        assert b.get_parent() is None
        assert editor.stranded == [b]
        assert not editor.is_visible(b)
        assert [e['operation'] for e in errors_of(editor)] == ["move_reattach"]
        assert surface.rendered_children("t_step_0") == ["t_step_1"]

        # The queue keeps working
        editor.create_child(root)
        await settle(editor)
        assert len(root.get_children()) == 2

        # A reparent gesture can put the stranded node back
        editor.reparent(b)
        editor.reparent(root)
        await settle(editor)
        assert root.get_children()[-1] is b
        assert editor.stranded == []
        assert helper.rendered_order(root) == helper.logical_order(root)
