"""Tests for parsing and validating raw analysis output."""

import json

import pytest

from repair_advisor.errors import ErrorKind, MalformedResponse
from repair_advisor.llm.validator import parse_analysis, strip_code_fence, validate_analysis


MINIMAL = '{"problem_analyza":"X","odhadovana_cena_kc":2500}'


class TestStripCodeFence:
    def test_plain_text_untouched(self):
        assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'

    def test_json_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_fence_without_language(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_single_line_fence(self):
        assert strip_code_fence('```{"a": 1}```') == '{"a": 1}'

    def test_inner_backticks_are_kept(self):
        text = '{"a": "use ``` here"}'
        assert strip_code_fence(text) == text


class TestValidateAnalysis:
    def test_minimal_payload_defaults(self):
        record = validate_analysis(MINIMAL)
        assert record.problem_analysis == "X"
        assert record.estimated_cost == 2500
        assert record.pros == []
        assert record.cons == []
        assert record.device_info is None

    def test_fenced_payload_matches_unfenced(self):
        fenced = '```json\n{"problem_analyza":"X","odhadovana_cena_kc":100}\n```'
        plain = '{"problem_analyza":"X","odhadovana_cena_kc":100}'
        assert validate_analysis(fenced) == validate_analysis(plain)

    def test_full_payload(self):
        payload = {
            "problem_analyza": "Vadná baterie.",
            "odhadovana_cena_kc": 1500,
            "klady_opravy": ["Rychlá oprava.", "Levné díly."],
            "zapory_opravy": ["Starší zařízení."],
            "info_o_zarizeni": "iPhone 11, 2019.",
        }
        record = validate_analysis(json.dumps(payload))
        assert record.pros == ["Rychlá oprava.", "Levné díly."]
        assert record.cons == ["Starší zařízení."]
        assert record.device_info == "iPhone 11, 2019."

    def test_missing_cost(self):
        with pytest.raises(MalformedResponse) as exc_info:
            validate_analysis('{"problem_analyza":"X"}')
        assert exc_info.value.kind == ErrorKind.MALFORMED_RESPONSE

    def test_not_json(self):
        with pytest.raises(MalformedResponse):
            validate_analysis("Omlouvám se, nevím.")

    def test_top_level_array(self):
        with pytest.raises(MalformedResponse):
            validate_analysis("[1, 2, 3]")

    def test_empty_text(self):
        with pytest.raises(MalformedResponse):
            validate_analysis("")

    @pytest.mark.parametrize(
        "payload",
        [
            {"odhadovana_cena_kc": 100},
            {"problem_analyza": 42, "odhadovana_cena_kc": 100},
            {"problem_analyza": "   ", "odhadovana_cena_kc": 100},
            {"problem_analyza": "X", "odhadovana_cena_kc": "2500"},
            {"problem_analyza": "X", "odhadovana_cena_kc": 2500.5},
            {"problem_analyza": "X", "odhadovana_cena_kc": True},
            {"problem_analyza": "X", "odhadovana_cena_kc": -1},
            {"problem_analyza": "X", "odhadovana_cena_kc": 100, "klady_opravy": "levné"},
            {"problem_analyza": "X", "odhadovana_cena_kc": 100, "zapory_opravy": ["a", 2]},
            {"problem_analyza": "X", "odhadovana_cena_kc": 100, "info_o_zarizeni": ["2021"]},
        ],
    )
    def test_contract_violations(self, payload):
        result = parse_analysis(json.dumps(payload))
        assert not result.ok
        assert result.reason

    def test_integral_float_cost_is_accepted(self):
        record = validate_analysis('{"problem_analyza":"X","odhadovana_cena_kc":2500.0}')
        assert record.estimated_cost == 2500
        assert isinstance(record.estimated_cost, int)

    def test_null_optionals_count_as_absent(self):
        record = validate_analysis(
            '{"problem_analyza":"X","odhadovana_cena_kc":0,'
            '"klady_opravy":null,"zapory_opravy":null,"info_o_zarizeni":null}'
        )
        assert record.pros == []
        assert record.cons == []
        assert record.device_info is None

    def test_parse_never_raises(self):
        result = parse_analysis("{not json")
        assert result.record is None
        assert "invalid json" in result.reason
