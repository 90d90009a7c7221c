# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Place template instances along an extracted path."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from .host import NodeId, PlacementHost
from .sampler import PathFlags, Pose, reconstruct_path
from .types import SampleSequence

LOG = logging.getLogger(__name__)

UNDO_NAME = "Place Path Markers"
CLEAR_UNDO_NAME = "Clear Path Markers"


def marker_name(index: int, time: float) -> str:
    return f"PathStep_{index:03d}_Time_{time:.2f}s"


def path_parent_name(tracked_name, clip_name) -> str:
    return f"StepsFor_{tracked_name or 'Unknown'}_in_{clip_name or 'Unknown'}"


class MarkerSet:
    """Nodes created by marker placement, owned until :meth:`clear`.

    Ownership follows the undo history: undoing a clear hands the restored
    nodes back to the set, redoing it takes them away again.
    """

    def __init__(self) -> None:
        self._nodes: list[NodeId] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    @property
    def nodes(self) -> list[NodeId]:
        return list(self._nodes)

    def add(self, node: NodeId) -> None:
        if node not in self._nodes:
            self._nodes.append(node)

    def extend(self, nodes: Iterable[NodeId]) -> None:
        for node in nodes:
            self.add(node)

    def discard(self, nodes: Iterable[NodeId]) -> None:
        dropped = set(nodes)
        self._nodes = [node for node in self._nodes if node not in dropped]

    def clear(self, placer: PlacementHost) -> int:
        """Destroy every node still alive as one undo step; return how many were destroyed."""
        owned = list(self._nodes)
        alive = [node for node in reversed(owned) if placer.is_valid(node)]
        if alive:
            with placer.undo_transaction(CLEAR_UNDO_NAME) as txn:
                for node in alive:
                    placer.destroy(node)
                    txn.add(_restore_fn(placer, node), _destroy_fn(placer, node))
                txn.add(lambda: self.extend(owned), lambda: self.discard(owned))
        self._nodes.clear()
        LOG.info("Cleared %d path marker(s)", len(alive))
        return len(alive)


def _destroy_fn(placer: PlacementHost, node: NodeId):
    return lambda: placer.destroy(node)


def _restore_fn(placer: PlacementHost, node: NodeId):
    return lambda: placer.restore_node(node)


def reference_pose(placer: PlacementHost, template: Any) -> Pose:
    """Return the pose a fresh instance of *template* starts with."""
    probe = placer.instantiate(template)
    try:
        position, euler, scale = placer.world_pose(probe)
    finally:
        placer.destroy(probe)
    return Pose(tuple(position), tuple(euler), tuple(scale))


def place_markers(
    placer: PlacementHost,
    sequence: SampleSequence,
    template: Any,
    flags: PathFlags,
    parent_name: str,
    markers: MarkerSet,
    *,
    select_parent: bool = True,
) -> NodeId:
    """Instantiate *template* once per sample under a new group named *parent_name*.

    Every created node is added to *markers*; creation is a single undo step.
    If the host fails partway, the nodes created so far are destroyed again
    and the error propagates.  Returns the parent group.
    """
    reference = reference_pose(placer, template)
    poses = reconstruct_path(sequence, flags, reference)

    LOG.info("Placing %d path markers in '%s'...", len(poses), parent_name)
    LOG.info("%s", flags.describe())

    created: list[NodeId] = []
    try:
        with placer.undo_transaction(UNDO_NAME) as txn:
            parent = placer.create_group(parent_name)
            created.append(parent)
            txn.add(_destroy_fn(placer, parent), _restore_fn(placer, parent))

            for index, pose in enumerate(poses):
                node = placer.instantiate(template)
                created.append(node)
                placer.rename(node, marker_name(index, pose.time))
                placer.set_world_pose(node, pose.position, pose.rotation, pose.scale)
                placer.set_parent(node, parent)
                txn.add(_destroy_fn(placer, node), _restore_fn(placer, node))

            txn.add(lambda: markers.discard(created), lambda: markers.extend(created))
    except Exception:
        LOG.error("Path creation failed, removing %d partially created node(s)", len(created))
        for node in reversed(created):
            if placer.is_valid(node):
                placer.destroy(node)
        raise

    markers.extend(created)

    if select_parent:
        placer.select(parent)

    LOG.info("Path creation complete. Created %d path steps.", len(poses))
    return parent
