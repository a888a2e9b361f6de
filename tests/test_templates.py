"""Tests for the template catalog and request matching."""

from __future__ import annotations

import pytest

from clean_cut_mcp.models.templates import TemplateRecord
from clean_cut_mcp.templates.registry import (
    catalog_stats,
    filter_by_category,
    filter_by_platform,
    get_template,
    load_catalog,
    parse_catalog,
)
from clean_cut_mcp.templates.selector import (
    analyze_user_request,
    matched_keywords,
    score_breakdown,
    score_template,
    select_templates,
)


def _template(template_id: str = "launch", **overrides: object) -> TemplateRecord:
    data = {
        "id": template_id,
        "name": template_id.title(),
        "category": "business",
        "keywords": ["launch"],
        "default_duration": 240,
        "energy": 5,
        "professional": 6,
        "colorfulness": 5,
        "platforms": ["youtube"],
        "component_path": f"src/patterns/templates/{template_id}.tsx",
    }
    data.update(overrides)
    return TemplateRecord.model_validate(data)


class TestCatalog:
    def test_bundled_catalog_loads(self):
        catalog = load_catalog()
        assert len(catalog) == 6
        assert load_catalog() is catalog
        assert get_template(catalog, "social-reel").aspect_ratio == "9:16"

    def test_missing_template_is_none(self):
        assert get_template(load_catalog(), "no-such-template") is None

    def test_duplicate_ids_rejected(self):
        entry = _template().model_dump()
        with pytest.raises(ValueError, match="Duplicate template id"):
            parse_catalog({"templates": [entry, entry]})

    def test_filters_and_stats(self):
        catalog = load_catalog()
        assert [t.id for t in filter_by_category(catalog, "social")] == ["social-reel"]
        assert "kinetic-quote" in [t.id for t in filter_by_platform(catalog, "instagram")]
        stats = catalog_stats(catalog)
        assert stats["total"] == 6
        assert stats["by_aspect_ratio"]["16:9"] == 4


class TestAnalyzeUserRequest:
    def test_platform_and_vertical_format(self):
        request = analyze_user_request("Quick Instagram reel about our launch")
        assert request.platform == "instagram"
        assert request.aspect_ratio == "9:16"
        assert request.energy == pytest.approx(0.6)
        assert "launch" in request.keywords

    def test_platform_implies_aspect_ratio(self):
        assert analyze_user_request("Post for LinkedIn").aspect_ratio == "16:9"

    def test_professional_tone_and_data(self):
        request = analyze_user_request("Professional quarterly results for investors")
        assert request.professional == 0.9
        assert request.colorfulness == 0.5
        assert request.has_data is True

    def test_playful_and_colourful(self):
        request = analyze_user_request("A fun, colorful birthday clip")
        assert request.professional == 0.3
        assert request.colorfulness == 0.9

    def test_stop_words_dropped(self):
        assert analyze_user_request("a video for the team").keywords == ["video", "team"]


class TestScoring:
    def test_perfect_match_scores_one(self):
        request = analyze_user_request("launch on youtube")
        assert score_template(_template(), request) == 1.0

    def test_breakdown_sums_to_score(self):
        request = analyze_user_request("calm launch for tiktok")
        template = _template(keywords=["launch", "product"])
        assert sum(score_breakdown(template, request).values()) == pytest.approx(score_template(template, request))

    def test_shared_stem_matches(self):
        request = analyze_user_request("analytics overview")
        assert matched_keywords(_template(keywords=["analysis", "chart"]), request) == ["analysis"]

    def test_short_words_need_exact_match(self):
        request = analyze_user_request("new app")
        assert matched_keywords(_template(keywords=["renewal", "application"]), request) == []
        assert matched_keywords(_template(keywords=["app", "renewal"]), request) == ["app"]

    def test_containment_of_longer_words(self):
        request = analyze_user_request("product demos")
        assert matched_keywords(_template(keywords=["demo", "products"]), request) == ["demo", "products"]

    def test_score_stays_in_unit_interval(self):
        request = analyze_user_request("explosive dramatic bold neon tiktok")
        template = _template(keywords=[], energy=0, professional=10, colorfulness=0, platforms=[])
        assert 0.0 <= score_template(template, request) <= 1.0


class TestSelectTemplates:
    def test_sorted_descending_with_reason(self):
        catalog = [_template("other", keywords=["quote"]), _template("launch")]
        matches = select_templates(catalog, "launch on youtube", top_n=2)
        assert [m.template.id for m in matches] == ["launch", "other"]
        assert matches[0].reason == "keyword match (launch) +0.45; energy fit +0.15"
        assert matches[0].matched_keywords == ["launch"]

    def test_ties_keep_catalog_order(self):
        catalog = [_template("first"), _template("second"), _template("third")]
        matches = select_templates(catalog, "launch", top_n=3)
        assert [m.template.id for m in matches] == ["first", "second", "third"]

    def test_catalog_not_mutated(self):
        catalog = [_template("b", keywords=["quote"]), _template("a")]
        select_templates(catalog, "launch")
        assert [t.id for t in catalog] == ["b", "a"]

    def test_top_n_limits_results(self):
        assert len(select_templates(load_catalog(), "product demo", top_n=2)) == 2

    def test_top_n_must_be_positive(self):
        with pytest.raises(ValueError, match="top_n"):
            select_templates(load_catalog(), "anything", top_n=0)

    def test_mismatch_warnings(self):
        match = select_templates([_template()], "instagram reel", top_n=1)[0]
        assert "Template is 16:9, you requested 9:16" in match.warnings
        assert "Template optimized for youtube, not instagram" in match.warnings

    def test_bundled_catalog_prefers_social_reel_for_instagram(self):
        best = select_templates(load_catalog(), "Instagram reel announcement", top_n=1)[0]
        assert best.template.id == "social-reel"
