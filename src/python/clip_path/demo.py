# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""A small animated rig for trying the extractor without an editor."""

from __future__ import annotations

from dataclasses import dataclass

from .memory_host import KeyframeClip, MemoryAnimator, MemoryScene


@dataclass
class DemoRig:
    scene: MemoryScene
    animator: MemoryAnimator
    root: int
    pivot: int
    tracked: int
    clip: KeyframeClip


def build_orbit_rig(length: float = 2.0, radius: float = 2.0, rise: float = 1.0) -> DemoRig:
    """Build ``Rig/Pivot/Arm`` where ``Arm`` orbits once around the Y axis.

    Over the clip the rig root rises by *rise*, the pivot turns 360 degrees and
    the arm doubles in scale, so the arm traces one turn of a helix.  An inactive
    ``Pivot/Helper`` node is included; it is not animated.
    """
    scene = MemoryScene()
    root = scene.add_node("Rig")
    pivot = scene.add_node("Pivot", root)
    arm = scene.add_node("Arm", pivot, position=(radius, 0.0, 0.0))
    scene.add_node("Helper", pivot, position=(0.0, 0.5, 0.0), active=False)

    clip = KeyframeClip("Orbit", length)
    clip.add_key("", "position", 0.0, (0.0, 0.0, 0.0))
    clip.add_key("", "position", length, (0.0, rise, 0.0))
    clip.add_key("Pivot", "rotation", 0.0, (0.0, 0.0, 0.0))
    clip.add_key("Pivot", "rotation", length, (0.0, 360.0, 0.0))
    clip.add_key("Pivot/Arm", "scale", 0.0, (1.0, 1.0, 1.0))
    clip.add_key("Pivot/Arm", "scale", length, (2.0, 2.0, 2.0))

    return DemoRig(scene, MemoryAnimator(scene), root, pivot, arm, clip)
