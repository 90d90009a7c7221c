#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""
Run a transform path extraction on the demo orbit rig and report the samples.

Prints one line per sample and optionally plots the path.

Usage:
    python3 scripts/path_report.py
    python3 scripts/path_report.py --time-step 0.05 --length 4 --plot out/orbit.png
    python3 scripts/path_report.py --config tools.toml
"""

from __future__ import annotations

import argparse
import logging
import sys

from clip_path import ConfigurationError, TransformExtractor, load_settings
from clip_path.demo import build_orbit_rig


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Extract and report the demo rig's path")
    parser.add_argument("--length", type=float, default=2.0, help="Clip length in seconds")
    parser.add_argument("--time-step", type=float, default=None, help="Seconds between samples")
    parser.add_argument("--config", default=None, help="TOML file with a [tool.clip_path] table")
    parser.add_argument("--plot", default=None, help="Write a path plot to this file")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config) if args.config else None
    except (OSError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rig = build_orbit_rig(length=args.length)
    extractor = TransformExtractor(
        rig.scene,
        rig.animator,
        settings,
        animated_root=rig.root,
        tracked_node=rig.tracked,
        animation_source=rig.clip,
    )
    if args.time_step is not None:
        extractor.settings.time_step = args.time_step

    try:
        sequence = extractor.extract()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for sample in sequence:
        print(sample)
    print(f"{len(sequence)} samples, path length {sequence.path_length():.4f}")

    if args.plot:
        import matplotlib

        matplotlib.use("Agg", force=True)
        from clip_path.report import plot_sequence

        plot_sequence(sequence, args.plot, title=f"{extractor.path_parent_name()}")
        print(f"Plot: {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
