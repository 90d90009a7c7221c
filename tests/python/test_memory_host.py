# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for the in-memory host used by the demo rig and the test suite."""

import numpy as np
import pytest

from clip_path.host import AnimationHost, AnimationSource, PlacementHost, SceneHost
from clip_path.memory_host import (
    KeyframeClip,
    MemoryAnimator,
    MemoryScene,
    NodeTemplate,
    UndoStack,
    euler_to_matrix,
    matrix_to_euler,
)


# ---------------------------------------------------------------------------
# Rotation helpers
# ---------------------------------------------------------------------------


class TestEuler:
    @pytest.mark.parametrize(
        "euler",
        [(0.0, 0.0, 0.0), (10.0, 20.0, 30.0), (0.0, 270.0, 0.0), (45.0, 135.0, 300.0), (350.0, 5.0, 90.0)],
    )
    def test_round_trip(self, euler):
        assert matrix_to_euler(euler_to_matrix(euler)) == pytest.approx(euler, abs=1e-9)

    def test_matrix_is_orthonormal(self):
        m = euler_to_matrix((12.0, 34.0, 56.0))
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-12)

    def test_application_order_z_then_x_then_y(self):
        # 90 about Z maps +X to +Y; 90 about X then maps +Y to +Z.
        v = euler_to_matrix((90.0, 0.0, 90.0)) @ np.array([1.0, 0.0, 0.0])
        np.testing.assert_allclose(v, [0.0, 0.0, 1.0], atol=1e-12)

    def test_full_turn_wraps_to_zero(self):
        assert matrix_to_euler(euler_to_matrix((0.0, 360.0, 0.0))) == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)

    def test_gimbal_lock(self):
        m = euler_to_matrix((90.0, 30.0, 0.0))
        back = matrix_to_euler(m)
        np.testing.assert_allclose(euler_to_matrix(back), m, atol=1e-9)


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------


class TestMemoryScene:
    def test_satisfies_host_protocols(self):
        scene = MemoryScene()
        assert isinstance(scene, SceneHost)
        assert isinstance(scene, PlacementHost)
        assert isinstance(MemoryAnimator(scene), AnimationHost)
        assert isinstance(KeyframeClip("Walk", 1.0), AnimationSource)

    def test_world_position_composes_parents(self):
        scene = MemoryScene()
        root = scene.add_node("Root", position=(0.0, 1.0, 0.0), scale=(2.0, 2.0, 2.0))
        child = scene.add_node("Child", root, position=(1.0, 0.0, 0.0))
        assert scene.world_position(child) == pytest.approx((2.0, 1.0, 0.0))

    def test_world_euler_ignores_scale(self):
        scene = MemoryScene()
        root = scene.add_node("Root", rotation=(0.0, 90.0, 0.0), scale=(3.0, 3.0, 3.0))
        child = scene.add_node("Child", root)
        assert scene.world_euler(child) == pytest.approx((0.0, 90.0, 0.0), abs=1e-9)

    def test_subtree_order_and_inactive_filter(self):
        scene = MemoryScene()
        root = scene.add_node("Root")
        a = scene.add_node("A", root)
        a1 = scene.add_node("A1", a)
        b = scene.add_node("B", root, active=False)
        b1 = scene.add_node("B1", b)
        assert scene.subtree(root) == [root, a, a1, b, b1]
        assert scene.subtree(root, include_inactive=False) == [root, a, a1]

    def test_removed_node_invalidates_descendants(self):
        scene = MemoryScene()
        root = scene.add_node("Root")
        a = scene.add_node("A", root)
        a1 = scene.add_node("A1", a)
        scene.remove_node(a)
        assert scene.is_valid(root)
        assert not scene.is_valid(a1)
        assert scene.subtree(root) == [root]
        scene.restore_node(a)
        assert scene.is_valid(a1)

    def test_unknown_node_is_invalid(self):
        assert not MemoryScene().is_valid(42)

    def test_path_of(self):
        scene = MemoryScene()
        root = scene.add_node("Root")
        a = scene.add_node("A", root)
        a1 = scene.add_node("A1", a)
        assert scene.path_of(root, root) == ""
        assert scene.path_of(a1, root) == "A/A1"
        with pytest.raises(ValueError):
            scene.path_of(root, a1)

    def test_set_parent_keeps_world_pose(self):
        scene = MemoryScene()
        group = scene.add_node("Group", position=(1.0, 2.0, 3.0), rotation=(0.0, 90.0, 0.0))
        node = scene.add_node("Node", position=(4.0, 0.0, 0.0), rotation=(0.0, 45.0, 0.0))
        scene.set_parent(node, group)
        assert scene.parent_of(node) == group
        assert scene.world_position(node) == pytest.approx((4.0, 0.0, 0.0), abs=1e-9)
        assert scene.world_euler(node) == pytest.approx((0.0, 45.0, 0.0), abs=1e-9)

    def test_instantiate_uses_template_pose(self):
        scene = MemoryScene()
        node = scene.instantiate(NodeTemplate("Marker", position=(1.0, 1.0, 1.0), scale=(0.5, 0.5, 0.5)))
        assert scene.node_name(node) == "Marker"
        assert scene.world_pose(node) == ((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.5, 0.5, 0.5))


# ---------------------------------------------------------------------------
# Undo
# ---------------------------------------------------------------------------


class TestUndoStack:
    def test_push_undo_redo(self):
        log = []
        stack = UndoStack()
        stack.push("step", lambda: log.append("undo"), lambda: log.append("redo"))
        assert stack.can_undo and not stack.can_redo
        assert stack.undo_name == "step"
        stack.undo()
        stack.redo()
        assert log == ["undo", "redo"]

    def test_transaction_groups_pairs_and_undoes_in_reverse(self):
        log = []
        stack = UndoStack()
        with stack.transaction("group") as txn:
            txn.add(lambda: log.append("u1"), lambda: log.append("r1"))
            txn.add(lambda: log.append("u2"), lambda: log.append("r2"))
        stack.undo()
        assert log == ["u2", "u1"]
        stack.redo()
        assert log == ["u2", "u1", "r1", "r2"]
        assert not stack.can_redo

    def test_transaction_discarded_on_error(self):
        stack = UndoStack()
        with pytest.raises(RuntimeError):
            with stack.transaction("group") as txn:
                txn.add(lambda: None, lambda: None)
                raise RuntimeError("abort")
        assert not stack.can_undo

    def test_empty_transaction_records_nothing(self):
        stack = UndoStack()
        with stack.transaction("nothing"):
            pass
        assert not stack.can_undo

    def test_push_clears_redo(self):
        stack = UndoStack()
        stack.push("a", lambda: None, lambda: None)
        stack.undo()
        stack.push("b", lambda: None, lambda: None)
        assert not stack.can_redo


# ---------------------------------------------------------------------------
# Clip and animator
# ---------------------------------------------------------------------------


class TestKeyframeClip:
    def test_linear_interpolation_and_clamping(self):
        clip = KeyframeClip("c", 2.0)
        clip.add_key("", "position", 1.0, (2.0, 0.0, 0.0))
        clip.add_key("", "position", 0.0, (0.0, 0.0, 0.0))
        assert clip.evaluate("", "position", 0.5) == pytest.approx((1.0, 0.0, 0.0))
        assert clip.evaluate("", "position", -1.0) == (0.0, 0.0, 0.0)
        assert clip.evaluate("", "position", 5.0) == (2.0, 0.0, 0.0)

    def test_missing_track(self):
        clip = KeyframeClip("c", 1.0)
        assert clip.evaluate("Arm", "scale", 0.0) is None
        assert not clip.has_track("Arm", "scale")

    def test_unknown_channel(self):
        with pytest.raises(ValueError, match="Unknown channel"):
            KeyframeClip("c", 1.0).add_key("", "color", 0.0, (1.0, 1.0, 1.0))


class TestMemoryAnimator:
    def test_sample_outside_sampling_mode_raises(self, rig):
        with pytest.raises(RuntimeError, match="outside sampling mode"):
            rig.animator.sample(rig.root, rig.clip, 0.0)

    def test_nested_begin_raises(self, rig):
        rig.animator.begin_sampling()
        with pytest.raises(RuntimeError, match="already active"):
            rig.animator.begin_sampling()

    def test_sample_writes_local_transforms(self, rig):
        rig.animator.begin_sampling()
        rig.animator.sample(rig.root, rig.clip, 1.0)
        rig.animator.end_sampling()
        assert rig.scene.local_pose(rig.root)[0] == pytest.approx((0.0, 0.5, 0.0))
        assert rig.scene.local_pose(rig.pivot)[1] == pytest.approx((0.0, 180.0, 0.0))
        assert rig.scene.local_scale(rig.tracked) == pytest.approx((1.5, 1.5, 1.5))
