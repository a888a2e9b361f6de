"""Tests for the coerce_json_param helper in types.py."""

from __future__ import annotations

from clean_cut_mcp.types import coerce_json_param


class TestCoerceJsonParamDict:
    """Coerce JSON string → dict."""

    def test_parses_json_string_to_dict(self):
        assert coerce_json_param('{"totalDuration": 240}', dict) == {"totalDuration": 240}

    def test_passes_dict_through(self):
        original = {"scenes": []}
        assert coerce_json_param(original, dict) is original

    def test_none_passes_through(self):
        assert coerce_json_param(None, dict) is None

    def test_rejects_list_when_expecting_dict(self):
        assert coerce_json_param('["a", "b"]', dict) == '["a", "b"]'

    def test_invalid_json_returns_original(self):
        assert coerce_json_param("{not json}", dict) == "{not json}"


class TestCoerceJsonParamList:
    """Coerce JSON string → list."""

    def test_parses_json_string_to_list(self):
        raw = '[{"name": "Hero", "startFrame": 0, "endFrame": 70}]'
        assert coerce_json_param(raw, list) == [{"name": "Hero", "startFrame": 0, "endFrame": 70}]

    def test_passes_list_through(self):
        original = ["Intro text"]
        assert coerce_json_param(original, list) is original

    def test_plain_string_returned_as_is(self):
        assert coerce_json_param("Intro text", list) == "Intro text"
