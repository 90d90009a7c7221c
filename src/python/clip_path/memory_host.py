# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""In-memory scene, clip and animator implementing the host protocols.

MemoryScene    – Scene graph with integer node ids.  Local transforms are a
                 position, Euler rotation in degrees and a scale; world matrices
                 are composed as ``T @ R @ S`` up the parent chain.  Euler
                 angles use the Z, X, Y application order (``R = Ry @ Rx @ Rz``)
                 and world angles are reported in ``[0, 360)``.
UndoStack      – Undo/redo pairs with grouping transactions.
KeyframeClip   – Per-node, per-channel linear keyframe tracks.
MemoryAnimator – Evaluates a KeyframeClip into a MemoryScene.

The scene also provides the placement primitives used for path markers, so a
single object covers ``SceneHost`` and ``PlacementHost``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from .host import Vec3


CHANNELS = ("position", "rotation", "scale")


# ---------------------------------------------------------------------------
# Matrix helpers
# ---------------------------------------------------------------------------


def euler_to_matrix(euler: Vec3) -> np.ndarray:
    """3x3 rotation for Euler angles in degrees, applied Z then X then Y."""
    x, y, z = (math.radians(a) for a in euler)
    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return ry @ rx @ rz


def matrix_to_euler(rot: np.ndarray) -> Vec3:
    """Inverse of :func:`euler_to_matrix`, angles normalized to ``[0, 360)``."""
    sin_x = float(np.clip(-rot[1, 2], -1.0, 1.0))
    x = math.asin(sin_x)
    if abs(sin_x) < 1.0 - 1e-9:
        y = math.atan2(rot[0, 2], rot[2, 2])
        z = math.atan2(rot[1, 0], rot[1, 1])
    else:
        # Gimbal lock: fold the remaining rotation into Y.
        z = 0.0
        y = math.atan2(-rot[2, 0], rot[0, 0])
    return tuple(_wrap_degrees(math.degrees(a)) for a in (x, y, z))


def _wrap_degrees(deg: float) -> float:
    deg = deg % 360.0
    if math.isclose(deg, 360.0, abs_tol=1e-9) or math.isclose(deg, 0.0, abs_tol=1e-9):
        return 0.0
    return deg


def trs_matrix(position: Vec3, euler: Vec3, scale: Vec3) -> np.ndarray:
    m = np.eye(4)
    m[:3, :3] = euler_to_matrix(euler) @ np.diag(np.asarray(scale, dtype=np.float64))
    m[:3, 3] = position
    return m


def _rotation_part(m: np.ndarray) -> np.ndarray:
    basis = m[:3, :3]
    norms = np.linalg.norm(basis, axis=0)
    norms[norms == 0.0] = 1.0
    return basis / norms


# ---------------------------------------------------------------------------
# Undo
# ---------------------------------------------------------------------------


@dataclass
class UndoStep:
    name: str
    undo: Callable[[], None]
    redo: Callable[[], None]


class Transaction:
    """Groups undo/redo pairs into a single step, committed on clean exit."""

    def __init__(self, stack: "UndoStack", name: str = "Grouped Changes") -> None:
        self._stack = stack
        self.name = name
        self._pairs: list[tuple[Callable[[], None], Callable[[], None]]] = []

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None and self._pairs:
            pairs = list(self._pairs)

            def undo():
                for undo_fn, _ in reversed(pairs):
                    undo_fn()

            def redo():
                for _, redo_fn in pairs:
                    redo_fn()

            self._stack.push(self.name, undo, redo)
        return False

    def add(self, undo: Callable[[], None], redo: Callable[[], None]) -> None:
        self._pairs.append((undo, redo))

    def __len__(self) -> int:
        return len(self._pairs)


class UndoStack:
    def __init__(self) -> None:
        self._undo: list[UndoStep] = []
        self._redo: list[UndoStep] = []

    def push(self, name: str, undo: Callable[[], None], redo: Callable[[], None]) -> None:
        self._undo.append(UndoStep(name, undo, redo))
        self._redo.clear()

    def transaction(self, name: str = "Grouped Changes") -> Transaction:
        return Transaction(self, name)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_name(self) -> str:
        return self._undo[-1].name if self._undo else ""

    def undo(self) -> None:
        if not self._undo:
            return
        step = self._undo.pop()
        step.undo()
        self._redo.append(step)

    def redo(self) -> None:
        if not self._redo:
            return
        step = self._redo.pop()
        step.redo()
        self._undo.append(step)


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------


@dataclass
class NodeTemplate:
    """Something to instantiate: a name plus the pose new instances start with."""

    name: str
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)


@dataclass
class _Node:
    id: int
    name: str
    parent: Optional[int]
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)
    active: bool = True
    removed: bool = False
    children: list[int] = field(default_factory=list)


class MemoryScene:
    """A small scene graph usable wherever a ``SceneHost`` or ``PlacementHost`` is expected."""

    def __init__(self) -> None:
        self._nodes: dict[int, _Node] = {}
        self._next_id = 1
        self.undo_stack = UndoStack()
        self.selection: Optional[int] = None

    # -- structure ----------------------------------------------------------

    def add_node(
        self,
        name: str,
        parent: Optional[int] = None,
        *,
        position: Vec3 = (0.0, 0.0, 0.0),
        rotation: Vec3 = (0.0, 0.0, 0.0),
        scale: Vec3 = (1.0, 1.0, 1.0),
        active: bool = True,
    ) -> int:
        if parent is not None and parent not in self._nodes:
            raise KeyError(f"Unknown parent node {parent}")
        node_id = self._next_id
        self._next_id += 1
        self._nodes[node_id] = _Node(
            node_id,
            name,
            parent,
            tuple(float(c) for c in position),
            tuple(float(c) for c in rotation),
            tuple(float(c) for c in scale),
            active,
        )
        if parent is not None:
            self._nodes[parent].children.append(node_id)
        return node_id

    def remove_node(self, node: int) -> None:
        """Remove *node*; its descendants stop being valid along with it."""
        self._nodes[node].removed = True

    def restore_node(self, node: int) -> None:
        self._nodes[node].removed = False

    def is_valid(self, node) -> bool:
        current = self._nodes.get(node)
        while current is not None:
            if current.removed:
                return False
            if current.parent is None:
                return True
            current = self._nodes.get(current.parent)
        return False

    def node_name(self, node: int) -> str:
        return self._nodes[node].name

    def parent_of(self, node: int) -> Optional[int]:
        return self._nodes[node].parent

    def children(self, node: int) -> list[int]:
        return [c for c in self._nodes[node].children if not self._nodes[c].removed]

    def find(self, name: str) -> Optional[int]:
        for node in self._nodes.values():
            if node.name == name and self.is_valid(node.id):
                return node.id
        return None

    def nodes(self) -> list[int]:
        return [n for n in self._nodes if self.is_valid(n)]

    def subtree(self, root: int, include_inactive: bool = True) -> list[int]:
        result = []
        stack = [root]
        while stack:
            node = stack.pop()
            if not self.is_valid(node):
                continue
            if not include_inactive and not self._nodes[node].active:
                continue
            result.append(node)
            stack.extend(reversed(self._nodes[node].children))
        return result

    def path_of(self, node: int, root: int) -> str:
        """Slash-separated names from *root* (exclusive) down to *node*."""
        parts = []
        current = node
        while current != root:
            if current is None:
                raise ValueError(f"Node {node} is not under {root}")
            parts.append(self._nodes[current].name)
            current = self._nodes[current].parent
        return "/".join(reversed(parts))

    # -- local transforms ---------------------------------------------------

    def local_pose(self, node: int) -> tuple[Vec3, Vec3, Vec3]:
        n = self._nodes[node]
        return n.position, n.rotation, n.scale

    def set_local_pose(self, node: int, position, rotation, scale) -> None:
        n = self._nodes[node]
        n.position, n.rotation, n.scale = position, rotation, scale

    def set_local_position(self, node: int, position: Vec3) -> None:
        self._nodes[node].position = tuple(float(c) for c in position)

    def set_local_rotation(self, node: int, rotation: Vec3) -> None:
        self._nodes[node].rotation = tuple(float(c) for c in rotation)

    def set_local_scale(self, node: int, scale: Vec3) -> None:
        self._nodes[node].scale = tuple(float(c) for c in scale)

    def local_scale(self, node: int) -> Vec3:
        return self._nodes[node].scale

    # -- world transforms ---------------------------------------------------

    def local_matrix(self, node: int) -> np.ndarray:
        n = self._nodes[node]
        return trs_matrix(n.position, n.rotation, n.scale)

    def world_matrix(self, node: Optional[int]) -> np.ndarray:
        m = np.eye(4)
        current = node
        while current is not None:
            m = self.local_matrix(current) @ m
            current = self._nodes[current].parent
        return m

    def world_position(self, node: int) -> Vec3:
        return tuple(float(c) for c in self.world_matrix(node)[:3, 3])

    def world_euler(self, node: int) -> Vec3:
        return matrix_to_euler(_rotation_part(self.world_matrix(node)))

    def world_pose(self, node: int) -> tuple[Vec3, Vec3, Vec3]:
        return self.world_position(node), self.world_euler(node), self.local_scale(node)

    def set_world_pose(self, node: int, position: Vec3, euler: Vec3, scale: Vec3) -> None:
        parent = self._nodes[node].parent
        if parent is None:
            self.set_local_position(node, position)
            self.set_local_rotation(node, euler)
        else:
            parent_m = self.world_matrix(parent)
            local_pos = np.linalg.inv(parent_m) @ np.append(np.asarray(position, dtype=np.float64), 1.0)
            local_rot = _rotation_part(parent_m).T @ euler_to_matrix(euler)
            self.set_local_position(node, local_pos[:3])
            self.set_local_rotation(node, matrix_to_euler(local_rot))
        self.set_local_scale(node, scale)

    # -- placement ----------------------------------------------------------

    def create_group(self, name: str) -> int:
        return self.add_node(name)

    def instantiate(self, template: NodeTemplate) -> int:
        return self.add_node(
            template.name,
            position=template.position,
            rotation=template.rotation,
            scale=template.scale,
        )

    def destroy(self, node: int) -> None:
        self.remove_node(node)
        if self.selection == node:
            self.selection = None

    def rename(self, node: int, name: str) -> None:
        self._nodes[node].name = name

    def set_parent(self, node: int, parent: Optional[int]) -> None:
        """Reparent keeping the world position and rotation."""
        position, euler, scale = self.world_pose(node)
        old = self._nodes[node].parent
        if old is not None:
            self._nodes[old].children.remove(node)
        self._nodes[node].parent = parent
        if parent is not None:
            self._nodes[parent].children.append(node)
        self.set_world_pose(node, position, euler, scale)

    def undo_transaction(self, name: str) -> Transaction:
        return self.undo_stack.transaction(name)

    def select(self, node: int) -> None:
        self.selection = node


# ---------------------------------------------------------------------------
# Clip and animator
# ---------------------------------------------------------------------------


class KeyframeClip:
    """Linear keyframe tracks addressed by ``(node path, channel)``.

    Node paths are relative to the root the clip is sampled on: ``""`` is the
    root itself, ``"Pivot/Arm"`` a grandchild.  Values are held constant before
    the first and after the last key.  Rotation keys are Euler degrees and are
    interpolated component-wise.
    """

    def __init__(self, name: str, length: float) -> None:
        self.name = name
        self.length = float(length)
        self._tracks: dict[tuple[str, str], list[tuple[float, Vec3]]] = {}

    def add_key(self, path: str, channel: str, time: float, value: Vec3) -> None:
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel '{channel}', expected one of {CHANNELS}")
        keys = self._tracks.setdefault((path, channel), [])
        keys.append((float(time), tuple(float(c) for c in value)))
        keys.sort(key=lambda k: k[0])

    def has_track(self, path: str, channel: str) -> bool:
        return (path, channel) in self._tracks

    def evaluate(self, path: str, channel: str, time: float) -> Optional[Vec3]:
        keys = self._tracks.get((path, channel))
        if not keys:
            return None
        times = np.array([k[0] for k in keys])
        values = np.array([k[1] for k in keys])
        return tuple(float(np.interp(time, times, values[:, axis])) for axis in range(3))


class MemoryAnimator:
    """``AnimationHost`` over a :class:`MemoryScene`."""

    def __init__(self, scene: MemoryScene) -> None:
        self._scene = scene
        self._sampling = False
        self.sampled_times: list[float] = []

    @property
    def sampling(self) -> bool:
        return self._sampling

    def begin_sampling(self) -> None:
        if self._sampling:
            raise RuntimeError("MemoryAnimator: sampling mode is already active")
        self._sampling = True

    def end_sampling(self) -> None:
        self._sampling = False

    def sample(self, root: int, clip: KeyframeClip, time: float) -> None:
        if not self._sampling:
            raise RuntimeError("MemoryAnimator: sample() called outside sampling mode")
        scene = self._scene
        for node in scene.subtree(root, include_inactive=True):
            path = scene.path_of(node, root)
            for channel in CHANNELS:
                value = clip.evaluate(path, channel, time)
                if value is None:
                    continue
                if channel == "position":
                    scene.set_local_position(node, value)
                elif channel == "rotation":
                    scene.set_local_rotation(node, value)
                else:
                    scene.set_local_scale(node, value)
        self.sampled_times.append(time)
