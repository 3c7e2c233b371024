"""Tests for best-effort JSON decoding of LLM output"""

import json

from testimony_prep.utils.json_parse import (
    best_effort_decode,
    parse_bracket_slice,
    parse_fenced,
    parse_regex_span,
    parse_strict,
    strip_code_fences,
)

QUESTIONS = [{"question": "Where were you?", "category": "timeline"}]


class TestStrategies:

    def test_strict(self):
        assert parse_strict(json.dumps(QUESTIONS)) == QUESTIONS
        assert parse_strict("not json") is None

    def test_strip_code_fences(self):
        assert strip_code_fences("```json\n[1]\n```") == "[1]"
        assert strip_code_fences("```\n{}\n```  ") == "{}"
        assert strip_code_fences("\ufeff[1]") == "[1]"

    def test_fenced(self):
        assert parse_fenced("```JSON\n" + json.dumps(QUESTIONS) + "\n```") == QUESTIONS

    def test_regex_span_finds_array_in_prose(self):
        text = "Here are your questions:\n" + json.dumps(QUESTIONS) + "\nGood luck!"
        assert parse_regex_span(text) == QUESTIONS

    def test_regex_span_falls_back_to_object(self):
        assert parse_regex_span('Result: {"followUp": "Why?"} done') == {"followUp": "Why?"}

    def test_bracket_slice(self):
        assert parse_bracket_slice("noise [1, 2, 3] more") == [1, 2, 3]
        assert parse_bracket_slice("no brackets") is None


class TestBestEffortDecode:

    def test_fenced_output_matches_unwrapped(self):
        raw = json.dumps(QUESTIONS)
        assert best_effort_decode("```json\n" + raw + "\n```", expect=list) == best_effort_decode(raw, expect=list)

    def test_expect_skips_wrong_type(self):
        # strict parse yields a dict, the array inside is what we asked for
        text = '{"questions": [{"question": "A?"}]}'
        assert best_effort_decode(text, expect=dict) == {"questions": [{"question": "A?"}]}
        assert best_effort_decode(text, expect=list) == [{"question": "A?"}]

    def test_unparsable_returns_none(self):
        assert best_effort_decode("I cannot help with that.", expect=list) is None
        assert best_effort_decode("", expect=list) is None

    def test_custom_strategies(self):
        assert best_effort_decode("[1]", strategies=[lambda text: None]) is None
