# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Sample an animation clip and record a tracked node's transform path."""

from .errors import (
    ConfigurationError,
    ExtractorBusyError,
    ExtractorError,
    MissingPrerequisiteError,
    SnapshotError,
)
from .extractor import TransformExtractor
from .log import attach_host_log, detach_host_log
from .markers import MarkerSet, place_markers
from .sampler import (
    IDENTITY_POSE,
    MarkerPose,
    PathFlags,
    PathSampler,
    Pose,
    reconstruct_path,
    sample_times,
    sampling_context,
)
from .settings import ExtractorSettings, load_settings, settings_from_mapping
from .snapshot import HierarchySnapshot, LocalPose
from .types import SampleSequence, TransformSample

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ExtractorBusyError",
    "ExtractorError",
    "ExtractorSettings",
    "HierarchySnapshot",
    "IDENTITY_POSE",
    "LocalPose",
    "MarkerPose",
    "MarkerSet",
    "MissingPrerequisiteError",
    "PathFlags",
    "PathSampler",
    "Pose",
    "SampleSequence",
    "SnapshotError",
    "TransformExtractor",
    "TransformSample",
    "attach_host_log",
    "detach_host_log",
    "load_settings",
    "place_markers",
    "reconstruct_path",
    "sample_times",
    "sampling_context",
    "settings_from_mapping",
]
