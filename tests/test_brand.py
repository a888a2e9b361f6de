"""Tests for brand palettes, extraction fallbacks and contrast."""

from __future__ import annotations

import json
import logging

import pytest

from clean_cut_mcp.brand import (
    contrast_ratio,
    default_palette,
    extract_palette,
    hex_to_rgb,
    lookup_palette,
    map_colors_to_roles,
    validate_palette_contrast,
)


class TestDefaultPalettes:
    @pytest.mark.parametrize("style", ["tech", "elegant", "corporate", "vibrant"])
    def test_known_styles(self, style):
        palette = lookup_palette(style)
        assert palette is not None
        assert palette.source == "default"
        assert palette.extraction_method == f"predefined_{style}_palette"

    def test_unknown_style_lookup_is_none(self):
        assert lookup_palette("pastel") is None

    def test_unknown_style_falls_back_to_tech(self):
        assert default_palette("pastel") == lookup_palette("tech")


class TestColourMath:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#10b981") == (16, 185, 129)
        assert hex_to_rgb("#fff") == (255, 255, 255)

    def test_bad_hex_raises(self):
        with pytest.raises(ValueError):
            hex_to_rgb("green")

    def test_black_on_white_is_max_contrast(self):
        assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)

    def test_default_palettes_meet_aaa(self):
        for style in ("tech", "elegant", "corporate", "vibrant"):
            assert validate_palette_contrast(default_palette(style)).valid is True

    def test_low_contrast_flagged(self):
        palette = default_palette("tech").model_copy(update={"text": "#222222"})
        check = validate_palette_contrast(palette)
        assert check.valid is False
        assert "need 7:1" in check.recommendation


class TestMapColorsToRoles:
    def test_dark_primary_gets_light_text(self):
        palette = map_colors_to_roles(["#101820", "#334155", "#F59E0B"])
        assert palette.primary == "#101820"
        assert palette.background == "#101820"
        assert palette.accent == "#f59e0b"
        assert palette.text == "#f0f6fc"

    def test_light_primary_gets_dark_text(self):
        assert map_colors_to_roles(["#fafafa"]).text == "#1a1a1a"

    def test_empty_is_none(self):
        assert map_colors_to_roles([]) is None


class TestExtractPalette:
    def test_no_asset_uses_fallback(self):
        assert extract_palette(None, "elegant") == default_palette("elegant")

    def test_missing_file_falls_back_with_log(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="clean_cut_mcp.brand"):
            palette = extract_palette(tmp_path / "logo.json", "corporate")
        assert palette == default_palette("corporate")
        assert "Brand asset not found" in caplog.text

    def test_json_palette_file(self, tmp_path):
        path = tmp_path / "brand.json"
        path.write_text(json.dumps({
            "primary": "#123456", "secondary": "#234567", "accent": "#ff00aa",
            "background": "#000000", "text": "#FFFFFF",
        }))
        palette = extract_palette(path)
        assert palette.source == "extracted"
        assert palette.extraction_method == "palette_file"
        assert palette.text == "#ffffff"

    def test_incomplete_json_falls_back(self, tmp_path):
        path = tmp_path / "brand.json"
        path.write_text(json.dumps({"primary": "#123456"}))
        assert extract_palette(path, "vibrant") == default_palette("vibrant")

    def test_svg_colours_by_frequency(self, tmp_path):
        path = tmp_path / "logo.svg"
        path.write_text(
            '<svg><rect fill="#0f172a"/><rect fill="#0f172a"/><circle fill="#38bdf8"/>'
            '<path stroke="#0F172A"/></svg>'
        )
        palette = extract_palette(path)
        assert palette.primary == "#0f172a"
        assert palette.secondary == "#38bdf8"
        assert palette.extraction_method == "svg_color_frequency"

    def test_raster_is_not_decoded(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        assert extract_palette(path, "tech") == default_palette("tech")
