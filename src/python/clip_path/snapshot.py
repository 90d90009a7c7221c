# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Capture and restore the local transforms of a whole subtree.

Sampling a clip writes into every animated node under the sampled root, parent
chains included, so the extractor snapshots the full subtree before it starts
and puts every node back afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from .errors import SnapshotError
from .host import NodeId, SceneHost

LOG = logging.getLogger(__name__)


class LocalPose(NamedTuple):
    position: Any
    rotation: Any
    scale: Any


class HierarchySnapshot:
    """Local poses of a subtree at the time of :meth:`capture`.

    Values are kept exactly as the host returned them and written back
    unchanged.  A snapshot restores once; restoring it again raises
    :class:`SnapshotError`.
    """

    def __init__(self, scene: SceneHost, poses: dict[NodeId, LocalPose]) -> None:
        self._scene = scene
        self._poses = poses
        self._consumed = False

    @classmethod
    def capture(cls, scene: SceneHost, root: NodeId) -> "HierarchySnapshot":
        """Record the local pose of *root* and all of its descendants, inactive ones included."""
        poses = {}
        for node in scene.subtree(root, include_inactive=True):
            poses[node] = LocalPose(*scene.local_pose(node))
        LOG.debug("Captured %d node(s) under %r", len(poses), root)
        return cls(scene, poses)

    def __len__(self) -> int:
        return len(self._poses)

    def __contains__(self, node: object) -> bool:
        return node in self._poses

    @property
    def node_ids(self) -> list[NodeId]:
        return list(self._poses)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def pose_of(self, node: NodeId) -> LocalPose:
        return self._poses[node]

    def restore(self) -> int:
        """Write every captured pose back and return how many nodes were restored.

        Nodes that no longer exist are skipped.
        """
        if self._consumed:
            raise SnapshotError("HierarchySnapshot has already been restored")
        self._consumed = True

        restored = 0
        for node, pose in self._poses.items():
            if not self._scene.is_valid(node):
                LOG.debug("Skipping restore of removed node %r", node)
                continue
            self._scene.set_local_pose(node, pose.position, pose.rotation, pose.scale)
            restored += 1
        return restored


def capture(scene: SceneHost, root: NodeId) -> HierarchySnapshot:
    return HierarchySnapshot.capture(scene, root)


def restore(snapshot: HierarchySnapshot) -> int:
    return snapshot.restore()
