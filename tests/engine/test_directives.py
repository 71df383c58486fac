# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for directive classification.
"""

import pytest

from rcrender.engine.directives import (
    DirectiveKind,
    OutputMode,
    PrimaryDirective,
    classify,
    is_primary,
    output_mode,
    require_kind,
)
from rcrender.engine.errors import UnknownDirectiveError

pytestmark = pytest.mark.unit


class TestClassify:
    """Test the closed directive table."""

    @pytest.mark.parametrize("name", ["file", "scss", "md", "njk", "raw", "yml", "custom"])
    def test_primary(self, name):
        assert classify(name) is DirectiveKind.primary
        assert is_primary(name)

    @pytest.mark.parametrize("name", ["with", "as"])
    def test_secondary(self, name):
        assert classify(name) is DirectiveKind.secondary
        assert not is_primary(name)

    def test_input_and_output(self):
        assert classify("in") is DirectiveKind.input
        assert classify("out") is DirectiveKind.output

    @pytest.mark.parametrize("name", ["data", "primaryCounter", "_with", "_as"])
    def test_auxiliary(self, name):
        assert classify(name) is DirectiveKind.auxiliary

    @pytest.mark.parametrize("name", ["json", "File", "", "with_value"])
    def test_unknown(self, name):
        assert classify(name) is DirectiveKind.unknown

    def test_primary_enum_matches_table(self):
        assert {d.value for d in PrimaryDirective} == {"file", "scss", "md", "njk", "raw", "yml", "custom"}


class TestRequireKind:
    def test_known_name_passes_through(self):
        assert require_kind("raw") is DirectiveKind.primary
        assert require_kind("data") is DirectiveKind.auxiliary

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownDirectiveError) as exc_info:
            require_kind("bogus", "home")
        assert exc_info.value.directive == "bogus"
        assert "home" in str(exc_info.value)


class TestOutputMode:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("raw", OutputMode.raw),
            ("string", OutputMode.string),
            ("", OutputMode.raw),
            (None, OutputMode.raw),
            ("first_serve", OutputMode.first_serve),
            ("object", OutputMode.object),
            ("property", OutputMode.property),
        ],
    )
    def test_known_modes(self, value, expected):
        assert output_mode(value) is expected

    @pytest.mark.parametrize("value", ["xml", "RAW", 3, ["raw"]])
    def test_unknown_modes(self, value):
        assert output_mode(value) is None
