"""Tests for VisualizerConfig."""

import dataclasses

import pytest

from lounge_visualizer.config import VisualizerConfig, VisualizerStyle, font_pixel_size
from lounge_visualizer.errors import UnsupportedStyle


class TestVisualizerConfig:
    def test_defaults(self):
        config = VisualizerConfig()
        assert config.style is VisualizerStyle.LOUNGE
        assert config.bar_width == 2
        assert config.bar_height == 2
        assert config.bar_spacing == 5
        assert config.bar_color == "#ffffff"
        assert config.shadow_blur == 10
        assert config.shadow_color == "#ffffff"
        assert config.font == ("12px", "Helvetica")
        assert config.font_css == "12px Helvetica"

    def test_style_string_is_converted(self):
        assert VisualizerConfig(style="lounge").style is VisualizerStyle.LOUNGE

    def test_unknown_style_fails_at_construction(self):
        with pytest.raises(UnsupportedStyle) as excinfo:
            VisualizerConfig(style="waveform")
        assert excinfo.value.style == "waveform"
        assert isinstance(excinfo.value, ValueError)

    def test_is_immutable(self):
        config = VisualizerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.bar_width = 4

    def test_font_list_becomes_tuple(self):
        assert VisualizerConfig(font=["14px", "Arial"]).font == ("14px", "Arial")

    @pytest.mark.parametrize("field, value", [
        ("bar_width", 0),
        ("bar_width", -1),
        ("bar_height", -1),
        ("bar_spacing", 0),
        ("shadow_blur", -5),
        ("font", ("12px",)),
        ("font", ("big", "Helvetica")),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            VisualizerConfig(**{field: value})

    def test_zero_bar_height_is_allowed(self):
        assert VisualizerConfig(bar_height=0).bar_height == 0


class TestFontPixelSize:
    @pytest.mark.parametrize("font, expected", [
        (("12px", "Helvetica"), 12),
        (("20", "Arial"), 20),
        ((16, "Arial"), 16),
    ])
    def test_parses_leading_number(self, font, expected):
        assert font_pixel_size(font) == expected
