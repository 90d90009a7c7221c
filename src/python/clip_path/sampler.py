# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Sample an animation clip on a fixed time grid and record a node's path.

Architecture overview
---------------------
sample_times       – The time grid: ``0, step, 2*step, ...`` up to and including
                     the clip length.  Times are computed by multiplication so
                     there is no accumulated drift, and a last grid point within
                     ``GRID_TOLERANCE`` steps of the clip end counts as the end.
sampling_context   – Brackets the host's sampling mode; the host always leaves
                     sampling mode, whatever happens inside the block.
PathSampler        – Snapshots the animated subtree, evaluates the clip at every
                     grid time through the host, reads back the tracked node's
                     world pose, and restores the subtree.
reconstruct_path   – Turns a SampleSequence into marker poses, taking the
                     components that are switched off from a reference pose.
"""

from __future__ import annotations

import contextlib
import logging
import math
import numbers
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional

from .errors import ConfigurationError
from .host import AnimationHost, AnimationSource, NodeId, SceneHost
from .snapshot import HierarchySnapshot
from .types import SampleSequence, TransformSample, Vec3

LOG = logging.getLogger(__name__)

#: Fraction of one time step by which the clip length may fall short of a grid
#: point and still have that grid point sampled.
GRID_TOLERANCE = 1e-6


# ---------------------------------------------------------------------------
# Time grid
# ---------------------------------------------------------------------------


def sample_count(clip_length: float, time_step: float) -> int:
    """Number of grid points in ``[0, clip_length]``."""
    return math.floor(clip_length / time_step + GRID_TOLERANCE) + 1


def sample_times(clip_length: float, time_step: float) -> list[float]:
    """Return the sampling grid for a clip of *clip_length* seconds.

    >>> sample_times(1.0, 0.25)
    [0.0, 0.25, 0.5, 0.75, 1.0]
    >>> sample_times(0.5, 1.0)
    [0.0]
    """
    if not time_step > 0:
        raise ConfigurationError("Time step must be greater than 0")
    if not (math.isfinite(clip_length) and clip_length >= 0):
        raise ConfigurationError(f"Animation length must be a finite value >= 0 (got {clip_length})")

    count = sample_count(clip_length, time_step)
    times = [i * time_step for i in range(count)]
    if abs(times[-1] - clip_length) <= GRID_TOLERANCE * time_step:
        times[-1] = float(clip_length)
    return times


# ---------------------------------------------------------------------------
# Sampling mode
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def sampling_context(animator: AnimationHost) -> Iterator[AnimationHost]:
    """Enter the host's sampling mode for the duration of the block."""
    animator.begin_sampling()
    try:
        yield animator
    finally:
        animator.end_sampling()


# ---------------------------------------------------------------------------
# PathSampler
# ---------------------------------------------------------------------------


def check_extract_inputs(root, tracked_node, clip: Optional[AnimationSource], time_step) -> list[str]:
    """Return the reasons an extraction with these inputs cannot run."""
    problems = []
    if root is None:
        problems.append("Animated root is not assigned")
    if tracked_node is None:
        problems.append("Transform to track is not assigned")
    if clip is None:
        problems.append("Animation source is not assigned")
    else:
        length = getattr(clip, "length", None)
        if not isinstance(length, numbers.Real) or not math.isfinite(length) or length < 0:
            problems.append(f"Animation length must be a finite value >= 0 (got {length!r})")
    if not isinstance(time_step, numbers.Real) or not time_step > 0:
        problems.append("Time step must be greater than 0")
    return problems


class PathSampler:
    """Records the world pose of a tracked node across an animation clip.

    The sampler is stateless between runs: every :meth:`extract` call returns a
    new :class:`SampleSequence` and leaves the scene as it found it.

    Usage::

        sampler = PathSampler(scene, animator)
        sequence = sampler.extract(root, hand, clip, time_step=0.1)
    """

    def __init__(self, scene: SceneHost, animator: AnimationHost) -> None:
        self._scene = scene
        self._animator = animator

    def extract(self, root: NodeId, tracked_node: NodeId, clip: AnimationSource, time_step: float) -> SampleSequence:
        """Sample *clip* on the subtree under *root* every *time_step* seconds.

        :raises ConfigurationError: if any input is missing or invalid.  Nothing
            has been touched in that case.
        """
        problems = check_extract_inputs(root, tracked_node, clip, time_step)
        if problems:
            for problem in problems:
                LOG.error("%s", problem)
            raise ConfigurationError(problems)

        clip_length = float(clip.length)
        times = sample_times(clip_length, time_step)
        clip_name = getattr(clip, "name", "<unnamed>")

        LOG.info(
            "Starting extraction from animation '%s' (length: %.3fs, step: %.3fs, %d samples)",
            clip_name,
            clip_length,
            time_step,
            len(times),
        )

        sequence = SampleSequence()
        snapshot = HierarchySnapshot.capture(self._scene, root)
        try:
            with sampling_context(self._animator):
                for t in times:
                    self._animator.sample(root, clip, t)
                    sequence.add_sample(self._read_sample(tracked_node, t))
        finally:
            restored = snapshot.restore()
            LOG.debug("Restored %d node(s) after sampling", restored)

        LOG.info("Extraction complete. Extracted %d samples.", len(sequence))
        return sequence

    def _read_sample(self, node: NodeId, t: float) -> TransformSample:
        scene = self._scene
        return TransformSample(
            position=_vec3(scene.world_position(node)),
            rotation=_vec3(scene.world_euler(node)),
            scale=_vec3(scene.local_scale(node)),
            time=t,
        )


def _vec3(v) -> Vec3:
    x, y, z = v
    return (float(x), float(y), float(z))


# ---------------------------------------------------------------------------
# Path reconstruction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PathFlags:
    """Which sampled components are applied to the path markers."""

    use_position: bool = True
    use_rotation: bool = True
    use_scale: bool = True

    def describe(self) -> str:
        parts = [
            name
            for name, enabled in (
                ("Position", self.use_position),
                ("Rotation", self.use_rotation),
                ("Scale", self.use_scale),
            )
            if enabled
        ]
        return "Using: " + (" ".join(parts) if parts else "nothing")


class Pose(NamedTuple):
    position: Vec3
    rotation: Vec3
    scale: Vec3


class MarkerPose(NamedTuple):
    position: Vec3
    rotation: Vec3
    scale: Vec3
    time: float


IDENTITY_POSE = Pose((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (1.0, 1.0, 1.0))


def reconstruct_path(
    sequence: SampleSequence,
    flags: PathFlags,
    reference: Optional[Pose] = None,
) -> list[MarkerPose]:
    """Return one marker pose per sample.

    Components disabled in *flags* are taken from *reference* (the identity
    pose when omitted).
    """
    ref = reference if reference is not None else IDENTITY_POSE
    return [
        MarkerPose(
            position=s.position if flags.use_position else ref.position,
            rotation=s.rotation if flags.use_rotation else ref.rotation,
            scale=s.scale if flags.use_scale else ref.scale,
            time=s.time,
        )
        for s in sequence
    ]
