# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Plot an extracted path with matplotlib.

The caller chooses the matplotlib backend; scripts that only write files
should switch to ``Agg`` before plotting.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt

from .types import SampleSequence

LOG = logging.getLogger(__name__)


def plot_sequence(sequence: SampleSequence, output: str | Path, title: Optional[str] = None) -> Path:
    """Write a top view (X/Z) and a height-over-time view (t/Y) of *sequence* to *output*.

    The file format follows the suffix of *output* (``.png``, ``.pdf``, ...).
    """
    output = Path(output)
    if not sequence:
        raise ValueError("Cannot plot an empty SampleSequence")

    pts = sequence.positions()
    times = sequence.times()

    fig, (ax_top, ax_side) = plt.subplots(1, 2, figsize=(10, 4.5))
    try:
        ax_top.plot(pts[:, 0], pts[:, 2], "-o", markersize=3, color="#1f77b4")
        ax_top.plot(pts[0, 0], pts[0, 2], "o", color="#2ca02c", label="start")
        ax_top.plot(pts[-1, 0], pts[-1, 2], "s", color="#d62728", label="end")
        ax_top.set_xlabel("X")
        ax_top.set_ylabel("Z")
        ax_top.set_aspect("equal", adjustable="datalim")
        ax_top.grid(True, alpha=0.3)
        ax_top.legend(loc="best", fontsize=8)
        ax_top.set_title("Top view")

        ax_side.plot(times, pts[:, 1], "-o", markersize=3, color="#ff7f0e")
        ax_side.set_xlabel("Time (s)")
        ax_side.set_ylabel("Y")
        ax_side.grid(True, alpha=0.3)
        ax_side.set_title("Height")

        fig.suptitle(title or f"{len(sequence)} samples, path length {sequence.path_length():.3f}")
        fig.tight_layout()

        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=120)
    finally:
        plt.close(fig)

    LOG.info("Path plot written to %s", output)
    return output
