"""Tests for the integrated brief-to-source generator."""

from __future__ import annotations

import logging

import pytest

from clean_cut_mcp.content import analyze_scenes
from clean_cut_mcp.errors import EnforcementFailedError, TemplateNotFoundError
from clean_cut_mcp.brand import default_palette
from clean_cut_mcp.generator import build_spec, choose_exit, generate_animation, split_code
from clean_cut_mcp.models.generation import GenerationRequest
from clean_cut_mcp.models.policy import DEFAULT_POLICY, RulePolicy
from clean_cut_mcp.timeline import validate_animation

SCENES = ["Launch day is here", "Meet the product", "Sign up today"]


class TestChooseExit:
    def test_energy_jump_cuts_hard(self):
        a, b = analyze_scenes(["fast dynamic explosive opener", "calm close"])
        assert choose_exit(a, b, 0, DEFAULT_POLICY) == "hard-cut"

    def test_similar_content_crossfades(self):
        a, b = analyze_scenes(["Meet the product today", "Meet the product now"])
        assert choose_exit(a, b, 0, DEFAULT_POLICY) == "crossfade-scale"

    def test_otherwise_rotating_wipes(self):
        a, b = analyze_scenes(SCENES[:2])
        assert choose_exit(a, b, 0, DEFAULT_POLICY) == "wipe-left"
        assert choose_exit(a, b, 1, DEFAULT_POLICY) == "wipe-up"


class TestSplitCode:
    def test_fenced_code_separated(self):
        text, code = split_code("Install it\n```bash\nnpm i clean-cut\n```\nthen run")
        assert text == "Install it then run"
        assert code == "npm i clean-cut"

    def test_plain_text_has_no_code(self):
        assert split_code("Just words") == ("Just words", None)


class TestBuildSpec:
    def test_layout_is_gapless_and_fills_budget(self):
        spec = build_spec(analyze_scenes(SCENES), 75, 15, 255)
        assert [(s.start_frame, s.end_frame) for s in spec.scenes] == [(0, 90), (90, 180), (180, 255)]
        assert spec.total_duration == 255
        assert validate_animation(spec.scene_definitions()).valid is True

    def test_entries_mirror_previous_exit(self):
        spec = build_spec(analyze_scenes(SCENES), 75, 15, 255)
        assert [s.exit_type for s in spec.scenes] == ["wipe-left", "wipe-up", "hard-cut"]
        assert [s.entry_transition for s in spec.scenes] == ["slide-up", "wipe-right", "slide-up"]
        assert spec.scenes[-1].exit_duration == 0

    def test_scene_names_follow_roles(self):
        spec = build_spec(analyze_scenes(SCENES), 75, 15, 255)
        assert [s.name for s in spec.scenes] == ["Intro1", "Body2", "Outro3"]

    def test_code_scene_gets_code_panel(self):
        spec = build_spec(analyze_scenes(["Setup\n```\npip install x\n```"]), 75, 15, 75)
        assert [e.type for e in spec.scenes[0].elements] == ["shot", "headline", "code-panel"]


class TestGenerateAnimation:
    def test_generates_code_for_valid_brief(self):
        result = generate_animation(GenerationRequest(scenes=SCENES, component_name="LaunchTeaser"))
        assert result.metadata.enforcement.valid is True
        assert result.metadata.duration.total_frames == 255
        assert "export const LaunchTeaser: React.FC" in result.code
        assert "export const LaunchTeaserConfig" in result.code
        assert "Duration: 255 frames" in result.code
        assert '"text": "Meet the product"' in result.code
        assert result.metadata.template_score is not None

    def test_forced_template_sets_canvas(self):
        result = generate_animation(GenerationRequest(scenes=SCENES, template_id="kinetic-quote"))
        assert result.metadata.template.id == "kinetic-quote"
        assert result.metadata.template_score is None
        assert "width: 1080," in result.code
        assert "height: 1080," in result.code

    def test_unknown_template_raises(self):
        with pytest.raises(TemplateNotFoundError):
            generate_animation(GenerationRequest(scenes=SCENES, template_id="no-such-template"))

    def test_failing_spec_raises_without_code(self):
        with pytest.raises(EnforcementFailedError) as info:
            generate_animation(
                GenerationRequest(scenes=SCENES),
                policy=RulePolicy(max_shot_scale=1.05),
            )
        rules = {v.rule for v in info.value.result.violations}
        assert rules == {"scale-exceeds-ceiling"}

    def test_brand_asset_goes_through_extractor(self):
        calls = []

        def extractor(path, style):
            calls.append((path, style))
            return default_palette("vibrant")

        result = generate_animation(
            GenerationRequest(scenes=SCENES, brand_asset="/brand/logo.svg", style="corporate"),
            palette_extractor=extractor,
        )
        assert calls == [("/brand/logo.svg", "corporate")]
        assert result.metadata.brand == default_palette("vibrant")

    def test_failing_extractor_falls_back_to_style_palette(self, caplog):
        def extractor(path, style):
            raise OSError("collaborator down")

        with caplog.at_level(logging.WARNING, logger="clean_cut_mcp.generator"):
            result = generate_animation(
                GenerationRequest(scenes=SCENES, brand_asset="/x.png", style="corporate"),
                palette_extractor=extractor,
            )
        assert result.metadata.brand == default_palette("corporate")
        assert result.code
        assert "collaborator down" in caplog.text

    def test_style_palette_without_asset(self):
        result = generate_animation(GenerationRequest(scenes=SCENES, style="elegant"))
        assert result.metadata.brand == default_palette("elegant")
        assert '"background": "#ffffff"' in result.code

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError, match="catalog is empty"):
            generate_animation(GenerationRequest(scenes=SCENES), catalog=())

    def test_output_is_deterministic(self):
        request = GenerationRequest(scenes=SCENES)
        assert generate_animation(request).code == generate_animation(request).code
