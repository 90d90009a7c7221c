# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Exception types raised by the path extractor."""


class ExtractorError(Exception):
    """Base class for all extractor errors."""


class ConfigurationError(ExtractorError):
    """A required reference is unset or a sampling parameter is invalid."""

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class MissingPrerequisiteError(ExtractorError):
    """Marker placement was requested before its inputs exist."""

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class ExtractorBusyError(ExtractorError):
    """An extraction was started while another one is still running."""


class SnapshotError(ExtractorError):
    """A hierarchy snapshot was used after it had been consumed."""
