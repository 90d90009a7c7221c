# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Shared fixtures for the clip_path tests."""

import sys
from pathlib import Path

import pytest

# Allow import directly from the source tree without installing.
_SRC = Path(__file__).parent.parent.parent / "src" / "python"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from clip_path.demo import build_orbit_rig  # noqa: E402


@pytest.fixture()
def rig():
    """Orbit rig: 2s clip, radius 2, rising by 1 over the clip."""
    return build_orbit_rig(length=2.0, radius=2.0, rise=1.0)
