# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Sample records produced by the path sampler.

TransformSample  – Immutable record of the tracked node's pose at one clip time.
SampleSequence   – Ordered list of samples.  Times must not decrease; the sampler
                   builds a fresh sequence for every extraction run.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

Vec3 = tuple[float, float, float]


def _fmt_vec(v: Vec3) -> str:
    return "(" + ", ".join(f"{c:.2f}" for c in v) + ")"


@dataclass(frozen=True)
class TransformSample:
    #: World-space position.
    position: Vec3
    #: World-space Euler angles in degrees.
    rotation: Vec3
    #: Local scale.
    scale: Vec3
    #: Offset along the clip in seconds.
    time: float

    def __str__(self) -> str:
        return (
            f"Time: {self.time:.2f}s, Pos: {_fmt_vec(self.position)}, "
            f"Rot: {_fmt_vec(self.rotation)}, Scale: {_fmt_vec(self.scale)}"
        )


class SampleSequence:
    """Ordered sequence of :class:`TransformSample`.

    Insertion order is time order: :meth:`add_sample` rejects a sample whose
    time is lower than the previous one.  Equal times are accepted.
    """

    def __init__(self, samples=()) -> None:
        self._samples: list[TransformSample] = []
        for sample in samples:
            self.add_sample(sample)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_sample(self, sample: TransformSample) -> None:
        """Append *sample*.

        :raises ValueError: if ``sample.time`` is less than the last sample's time.
        """
        if self._samples and sample.time < self._samples[-1].time:
            raise ValueError(
                f"SampleSequence: sample times must be monotonically increasing "
                f"(got {sample.time} after {self._samples[-1].time})"
            )
        self._samples.append(sample)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return bool(self._samples)

    def __iter__(self) -> Iterator[TransformSample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> TransformSample:
        return self._samples[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleSequence):
            return NotImplemented
        return self._samples == other._samples

    def __repr__(self) -> str:
        return f"SampleSequence({len(self._samples)} samples)"

    @property
    def samples(self) -> list[TransformSample]:
        return list(self._samples)

    def times(self) -> list[float]:
        return [s.time for s in self._samples]

    def positions(self) -> np.ndarray:
        return self._stack("position")

    def rotations(self) -> np.ndarray:
        return self._stack("rotation")

    def scales(self) -> np.ndarray:
        return self._stack("scale")

    def _stack(self, attr: str) -> np.ndarray:
        if not self._samples:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([getattr(s, attr) for s in self._samples], dtype=np.float64)

    def path_length(self) -> float:
        """Total length of the polyline through the sampled positions."""
        if len(self._samples) < 2:
            return 0.0
        pts = self.positions()
        return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))

    def sample_index_for_time(self, time_seconds: float) -> int:
        """Return the index of the sample whose time is nearest to *time_seconds*.

        Clamps to the first/last sample outside the sampled range; on a tie the
        earlier sample wins.  Returns 0 when the sequence is empty.
        """
        if not self._samples:
            return 0
        times = self.times()
        pos = bisect.bisect_left(times, time_seconds)
        if pos == len(times):
            return len(times) - 1
        if pos == 0:
            return 0
        lower = pos - 1
        d_lower = time_seconds - times[lower]
        d_upper = times[pos] - time_seconds
        return lower if d_lower <= d_upper else pos

    def sample_for_time(self, time_seconds: float) -> Optional[TransformSample]:
        if not self._samples:
            return None
        return self._samples[self.sample_index_for_time(time_seconds)]
