# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Host collaborator interfaces.

The extractor never talks to an authoring application directly. Everything it
needs from the host is described here as a protocol so that an editor binding,
the in-memory host in :mod:`clip_path.memory_host`, or a test fake can be
plugged in interchangeably.

Node handles are opaque hashable values (the in-memory host uses integer ids,
as the application scene graph does).
"""

from __future__ import annotations

from typing import Any, Callable, ContextManager, Hashable, Protocol, runtime_checkable

Vec3 = tuple[float, float, float]
NodeId = Hashable


@runtime_checkable
class SceneHost(Protocol):
    """Read/write access to the scene graph transforms."""

    def is_valid(self, node: NodeId) -> bool:
        """True while *node* still exists in the scene."""

    def node_name(self, node: NodeId) -> str: ...

    def subtree(self, root: NodeId, include_inactive: bool = True) -> list[NodeId]:
        """Return *root* followed by every descendant."""

    def local_pose(self, node: NodeId) -> tuple[Any, Any, Any]:
        """Return the local ``(position, rotation, scale)`` as host values."""

    def set_local_pose(self, node: NodeId, position: Any, rotation: Any, scale: Any) -> None: ...

    def world_position(self, node: NodeId) -> Vec3: ...

    def world_euler(self, node: NodeId) -> Vec3:
        """World rotation as Euler angles in degrees."""

    def local_scale(self, node: NodeId) -> Vec3: ...


@runtime_checkable
class AnimationHost(Protocol):
    """Editor-side animation evaluator."""

    def begin_sampling(self) -> None: ...

    def end_sampling(self) -> None: ...

    def sample(self, root: NodeId, clip: AnimationSource, time: float) -> None:
        """Evaluate *clip* on the hierarchy under *root* at *time*, writing the
        result into the live transforms."""


@runtime_checkable
class AnimationSource(Protocol):
    """Minimal view of a clip: a display name and a duration in seconds."""

    @property
    def name(self) -> str: ...

    @property
    def length(self) -> float: ...


class UndoTransaction(Protocol):
    def add(self, undo: Callable[[], None], redo: Callable[[], None]) -> None: ...


@runtime_checkable
class PlacementHost(Protocol):
    """Object creation primitives used when placing path markers."""

    def is_valid(self, node: NodeId) -> bool: ...

    def create_group(self, name: str) -> NodeId: ...

    def instantiate(self, template: Any) -> NodeId: ...

    def destroy(self, node: NodeId) -> None:
        """Remove *node* immediately without recording an undo step."""

    def restore_node(self, node: NodeId) -> None:
        """Bring back a node removed by :meth:`destroy`."""

    def rename(self, node: NodeId, name: str) -> None: ...

    def world_pose(self, node: NodeId) -> tuple[Vec3, Vec3, Vec3]:
        """Return ``(world position, world euler, local scale)``."""

    def set_world_pose(self, node: NodeId, position: Vec3, euler: Vec3, scale: Vec3) -> None: ...

    def set_parent(self, node: NodeId, parent: NodeId) -> None:
        """Reparent *node* keeping its world pose."""

    def undo_transaction(self, name: str) -> ContextManager[UndoTransaction]: ...

    def select(self, node: NodeId) -> None: ...
