# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Extraction session: references, settings, and the extracted sample sequence.

A :class:`TransformExtractor` plays the role of the editor component the user
configures.  UI triggers should be enabled from :attr:`can_extract` and
:attr:`can_place_markers`, and show the matching ``*_blockers()`` messages
while disabled.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .errors import ConfigurationError, ExtractorBusyError, MissingPrerequisiteError
from .host import AnimationHost, AnimationSource, NodeId, PlacementHost, SceneHost
from .markers import MarkerSet, path_parent_name, place_markers
from .sampler import PathSampler, check_extract_inputs
from .settings import ExtractorSettings
from .types import SampleSequence

LOG = logging.getLogger(__name__)


class TransformExtractor:
    """Holds extraction inputs and owns the resulting :class:`SampleSequence`.

    Usage::

        extractor = TransformExtractor(scene, animator)
        extractor.animated_root = root
        extractor.tracked_node = hand
        extractor.animation_source = clip
        extractor.extract()
        extractor.marker_template = NodeTemplate("Marker")
        extractor.place_markers(scene)
    """

    def __init__(
        self,
        scene: SceneHost,
        animator: AnimationHost,
        settings: Optional[ExtractorSettings] = None,
        *,
        animated_root: Optional[NodeId] = None,
        tracked_node: Optional[NodeId] = None,
        animation_source: Optional[AnimationSource] = None,
        marker_template: Any = None,
    ) -> None:
        self._scene = scene
        self._sampler = PathSampler(scene, animator)
        self.settings = settings if settings is not None else ExtractorSettings()
        self.animated_root = animated_root
        self.tracked_node = tracked_node
        self.animation_source = animation_source
        self.marker_template = marker_template
        self._sequence = SampleSequence()
        self.markers = MarkerSet()
        self._running = False

    @property
    def sequence(self) -> SampleSequence:
        """Result of the last successful extraction (empty before the first one)."""
        return self._sequence

    @property
    def is_running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract_blockers(self) -> list[str]:
        return check_extract_inputs(
            self.animated_root,
            self.tracked_node,
            self.animation_source,
            self.settings.time_step,
        )

    @property
    def can_extract(self) -> bool:
        return not self._running and not self.extract_blockers()

    def extract(self) -> SampleSequence:
        """Sample the animation source and replace :attr:`sequence` with the result.

        :raises ConfigurationError: if a reference is unset or the time step is not positive.
        :raises ExtractorBusyError: if called while an extraction is already running.
        """
        if self._running:
            raise ExtractorBusyError("An extraction is already in progress")

        problems = self.extract_blockers()
        if problems:
            for problem in problems:
                LOG.error("%s", problem)
            raise ConfigurationError(problems)

        self._running = True
        try:
            sequence = self._sampler.extract(
                self.animated_root,
                self.tracked_node,
                self.animation_source,
                self.settings.time_step,
            )
        finally:
            self._running = False

        self._sequence = sequence
        return sequence

    # ------------------------------------------------------------------
    # Marker placement
    # ------------------------------------------------------------------

    def placement_blockers(self) -> list[str]:
        problems = []
        if not self._sequence:
            problems.append("No transform values available. Extract transform values first")
        if self.marker_template is None:
            problems.append("Path step template is not assigned")
        return problems

    @property
    def can_place_markers(self) -> bool:
        return not self.placement_blockers()

    def path_parent_name(self) -> str:
        tracked = None
        if self.tracked_node is not None and self._scene.is_valid(self.tracked_node):
            tracked = self._scene.node_name(self.tracked_node)
        clip = getattr(self.animation_source, "name", None)
        return path_parent_name(tracked, clip)

    def place_markers(self, placer: PlacementHost) -> NodeId:
        """Place one template instance per sample; returns the new parent group.

        :raises MissingPrerequisiteError: before the first extraction or without a template.
        """
        problems = self.placement_blockers()
        if problems:
            for problem in problems:
                LOG.error("%s", problem)
            raise MissingPrerequisiteError(problems)

        return place_markers(
            placer,
            self._sequence,
            self.marker_template,
            self.settings.flags,
            self.path_parent_name(),
            self.markers,
            select_parent=self.settings.select_parent_after_placement,
        )

    def clear_markers(self, placer: PlacementHost) -> int:
        """Destroy every marker this session created."""
        return self.markers.clear(placer)
