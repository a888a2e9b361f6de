"""Tests for the learned-rule enforcement gate."""

from __future__ import annotations

from clean_cut_mcp.enforcement import can_generate, enforce_learned_rules, render_enforcement_report
from clean_cut_mcp.models.policy import RulePolicy
from tests.conftest import make_spec


def _two_scene_spec(headline: dict | None = None, shot_scale: float = 1.1, **second: object) -> list[dict]:
    element = {"type": "headline", "width": 800, "height": 200, "velocity": 2.0}
    element.update(headline or {})
    return [
        {
            "name": "Intro",
            "start_frame": 0,
            "end_frame": 90,
            "entry_transition": "slide-up",
            "elements": [
                {"type": "shot", "width": 1920, "height": 1080, "scale": shot_scale, "level": "shot"},
                element,
            ],
        },
        {
            "name": "Outro",
            "start_frame": 90,
            "end_frame": 165,
            "exit_type": "hard-cut",
            "exit_duration": 0,
            "entry_transition": second.get("entry_transition", "crossfade-scale"),
        },
    ]


def _rules(result) -> list[str]:
    return [v.rule for v in result.violations]


class TestMotionBlur:
    def test_fast_element_without_blur_fails(self):
        spec = make_spec(_two_scene_spec({"velocity": 200, "has_motion_blur": False}))
        result = enforce_learned_rules(spec)
        assert result.valid is False
        assert _rules(result) == ["missing-motion-blur"]
        assert result.violations[0].location == "Intro/headline"

    def test_same_spec_with_blur_passes(self):
        spec = make_spec(_two_scene_spec({"velocity": 200, "has_motion_blur": True}))
        result = enforce_learned_rules(spec)
        assert result.valid is True
        assert result.violations == []

    def test_scene_level_blur_satisfies_rule(self):
        scenes = _two_scene_spec({"velocity": 200})
        scenes[0]["has_motion_blur"] = True
        assert can_generate(make_spec(scenes)) is True

    def test_threshold_comes_from_policy(self):
        spec = make_spec(_two_scene_spec({"velocity": 4.0}))
        assert can_generate(spec) is False
        assert can_generate(spec, RulePolicy(motion_blur_velocity=5.0)) is True


class TestEntryTransitions:
    def test_later_scene_without_entry_fails(self):
        spec = make_spec(_two_scene_spec(entry_transition="none"))
        result = enforce_learned_rules(spec)
        assert _rules(result) == ["no-entry-transition"]
        assert result.must_fix == ["Outro: add an entry transition"]

    def test_first_scene_may_pop_in(self):
        scenes = _two_scene_spec()
        scenes[0]["entry_transition"] = "none"
        assert can_generate(make_spec(scenes)) is True


class TestScaleRules:
    def test_element_scale_is_isolation_violation(self):
        spec = make_spec(_two_scene_spec({"scale": 1.22}))
        result = enforce_learned_rules(spec)
        assert _rules(result) == ["scale-isolation-violation"]
        assert "'element' level" in result.violations[0].issue
        assert any("Compound scale" in tip for tip in result.recommendations)

    def test_identity_element_scale_is_ignored(self):
        assert can_generate(make_spec(_two_scene_spec({"scale": 1.0}))) is True

    def test_shot_scale_over_ceiling(self):
        result = enforce_learned_rules(make_spec(_two_scene_spec(shot_scale=1.3)))
        assert _rules(result) == ["scale-exceeds-ceiling"]
        assert "1.21x" in result.violations[0].fix

    def test_shot_scale_at_ceiling_passes(self):
        assert can_generate(make_spec(_two_scene_spec(shot_scale=1.21))) is True


class TestTimelineFolding:
    def test_timeline_errors_become_violations(self):
        scenes = _two_scene_spec()
        scenes[1]["start_frame"] = 100
        result = enforce_learned_rules(make_spec(scenes))
        assert _rules(result) == ["gap"]
        assert result.violations[0].location == "Intro -> Outro"

    def test_timeline_warnings_pass_through(self):
        result = enforce_learned_rules(make_spec(_two_scene_spec()))
        assert any("too fast" in w for w in result.warnings)

    def test_short_total_duration_warns(self):
        result = enforce_learned_rules(make_spec(_two_scene_spec(), total=100))
        assert result.valid is True
        assert any("shorter than the last scene end" in w for w in result.warnings)


class TestRecommendations:
    def test_wipe_exit_suggests_mirrored_entry(self):
        scenes = _two_scene_spec()
        scenes[0]["exit_type"] = "wipe-left"
        result = enforce_learned_rules(make_spec(scenes))
        assert "Outro should enter with wipe-right" in result.recommendations[0]

    def test_matching_entry_has_no_tip(self):
        scenes = _two_scene_spec(entry_transition="wipe-right")
        scenes[0]["exit_type"] = "wipe-left"
        assert enforce_learned_rules(make_spec(scenes)).recommendations == []


class TestReport:
    def test_failing_report_lists_must_fix(self):
        spec = make_spec(_two_scene_spec({"velocity": 200}))
        report = render_enforcement_report(enforce_learned_rules(spec))
        assert "1 CRITICAL VIOLATION(S)" in report
        assert "Intro/headline: add motion blur" in report
        assert "Violation 1: missing-motion-blur" in report

    def test_passing_report(self):
        report = render_enforcement_report(enforce_learned_rules(make_spec(_two_scene_spec())))
        assert "ALL CRITICAL RULES PASSED" in report


class TestCropRecommendations:
    def test_wide_element_outgrows_zoomed_shot(self):
        spec = make_spec(_two_scene_spec({"width": 1800}, shot_scale=1.1))
        result = enforce_learned_rules(spec)
        assert result.valid is True
        crop_tips = [tip for tip in result.recommendations if "overflows" in tip]
        assert crop_tips == [
            "Intro/headline: 1800x200 at 1.10x overflows the 1920x1080 frame; max safe scale is 1.01x"
        ]

    def test_fitting_element_has_no_crop_tip(self):
        result = enforce_learned_rules(make_spec(_two_scene_spec(shot_scale=1.2)))
        assert not any("overflows" in tip for tip in result.recommendations)

    def test_scene_without_shot_uses_default_canvas(self):
        scenes = _two_scene_spec()
        scenes[1]["elements"] = [{"type": "banner", "width": 2000, "height": 100}]
        result = enforce_learned_rules(make_spec(scenes))
        assert any(tip.startswith("Outro/banner:") and "1920x1080" in tip for tip in result.recommendations)
