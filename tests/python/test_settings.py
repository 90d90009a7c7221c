# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for ExtractorSettings and the TOML loader."""

import pytest

from clip_path.errors import ConfigurationError
from clip_path.sampler import PathFlags
from clip_path.settings import ExtractorSettings, load_settings, settings_from_mapping


class TestExtractorSettings:
    def test_defaults(self):
        s = ExtractorSettings()
        assert s.time_step == pytest.approx(0.1)
        assert s.flags == PathFlags(True, True, True)
        assert s.validate() == []

    def test_validate_time_step(self):
        assert ExtractorSettings(time_step=0.0).validate() == ["Time step must be greater than 0"]

    def test_flags_follow_fields(self):
        s = ExtractorSettings(use_rotation=False)
        assert s.flags == PathFlags(use_position=True, use_rotation=False, use_scale=True)


class TestSettingsFromMapping:
    def test_int_time_step_is_converted(self):
        s = settings_from_mapping({"time_step": 1})
        assert s.time_step == 1.0
        assert isinstance(s.time_step, float)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="unknown setting 'step'"):
            settings_from_mapping({"step": 0.1})

    def test_wrong_type(self):
        with pytest.raises(ConfigurationError, match="use_scale"):
            settings_from_mapping({"use_scale": "yes"})

    def test_bool_time_step_rejected(self):
        with pytest.raises(ConfigurationError, match="must be a number"):
            settings_from_mapping({"time_step": True})

    def test_non_positive_time_step(self):
        with pytest.raises(ConfigurationError, match="greater than 0"):
            settings_from_mapping({"time_step": -1.0})

    def test_collects_all_problems(self):
        with pytest.raises(ConfigurationError) as info:
            settings_from_mapping({"a": 1, "use_position": 0})
        assert len(info.value.problems) == 2


class TestLoadSettings:
    def test_reads_tool_table(self, tmp_path):
        path = tmp_path / "tools.toml"
        path.write_text(
            """
[project]
name = "scene"

[tool.clip_path]
time_step = 0.05
use_rotation = false
"""
        )
        s = load_settings(path)
        assert s.time_step == pytest.approx(0.05)
        assert s.use_rotation is False
        assert s.use_position is True

    def test_missing_table_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.toml"
        path.write_text("[tool.other]\nx = 1\n")
        assert load_settings(path) == ExtractorSettings()

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[tool.clip_path\ntime_step = ")
        with pytest.raises(ConfigurationError, match="broken.toml"):
            load_settings(path)

    def test_table_must_be_a_table(self, tmp_path):
        path = tmp_path / "scalar.toml"
        path.write_text("[tool]\nclip_path = 3\n")
        with pytest.raises(ConfigurationError, match="must be a table"):
            load_settings(path)

    def test_tool_must_be_a_table(self, tmp_path):
        path = tmp_path / "tool.toml"
        path.write_text("tool = 5\n")
        with pytest.raises(ConfigurationError, match=r"\[tool\] must be a table"):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.toml")
