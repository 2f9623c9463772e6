"""Tests for reviewer response parsing."""

from __future__ import annotations

import json
from typing import Any

import pytest

from reviewplane.core.errors import ErrorCode, ResponseParseError
from reviewplane.walkthrough.models import BlockRef
from reviewplane.walkthrough.parser import extract_json_object, format_loc, parse_response


def _response(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "overview": "Adds retry support.",
        "steps": [
            {
                "title": "New helper",
                "explanation": "Introduces backoff.",
                "change_blocks": [{"file": "a.py", "change_block_index": 0}],
            },
            {
                "title": "Wiring",
                "explanation": "Uses it.",
                "change_blocks": [
                    {"file": "b.py", "change_block_index": 1},
                    {"file": "a.py", "change_block_index": 2},
                ],
            },
        ],
    }
    data.update(overrides)
    return data


class TestExtractJsonObject:
    def test_strips_surrounding_prose(self) -> None:
        output = 'Sure!\n```json\n{"a": {"b": 1}}\n```\nDone.'

        assert extract_json_object(output) == '{"a": {"b": 1}}'

    @pytest.mark.parametrize("output", ["", "no json here", "} backwards {"])
    def test_missing_object(self, output: str) -> None:
        with pytest.raises(ResponseParseError) as exc_info:
            extract_json_object(output)

        assert exc_info.value.code == ErrorCode.RESPONSE_NO_JSON


class TestFormatLoc:
    @pytest.mark.parametrize(
        ("loc", "expected"),
        [
            (("overview",), "overview"),
            (("steps", 2, "change_blocks", 0), "steps[2].change_blocks[0]"),
            (("steps", 0, "title"), "steps[0].title"),
            ((), ""),
        ],
    )
    def test_paths(self, loc: tuple[int | str, ...], expected: str) -> None:
        assert format_loc(loc) == expected


class TestParseResponse:
    """Whole-response parsing."""

    def test_valid_response(self) -> None:
        walkthrough = parse_response(json.dumps(_response()))

        assert walkthrough.overview == "Adds retry support."
        assert [s.title for s in walkthrough.steps] == ["New helper", "Wiring"]
        assert list(walkthrough.refs()) == [
            BlockRef("a.py", 0),
            BlockRef("b.py", 1),
            BlockRef("a.py", 2),
        ]

    def test_wrapped_in_code_fence(self) -> None:
        output = "Here you go:\n```json\n" + json.dumps(_response()) + "\n```"

        assert len(parse_response(output).steps) == 2

    def test_unknown_keys_ignored(self) -> None:
        walkthrough = parse_response(json.dumps(_response(confidence="high")))

        assert walkthrough.overview == "Adds retry support."

    def test_invalid_json(self) -> None:
        with pytest.raises(ResponseParseError) as exc_info:
            parse_response('{"overview": "x", "steps": [}')

        assert exc_info.value.code == ErrorCode.RESPONSE_INVALID_JSON
        assert exc_info.value.message.startswith("Failed to parse JSON: ")

    def test_missing_nested_field_reports_path(self) -> None:
        data = _response()
        data["steps"].append(
            {
                "title": "Tests",
                "explanation": "Covers it.",
                "change_blocks": [{"change_block_index": 0}],
            }
        )

        with pytest.raises(ResponseParseError) as exc_info:
            parse_response(json.dumps(data))

        assert exc_info.value.code == ErrorCode.RESPONSE_INVALID_FIELD
        assert exc_info.value.field_path == "steps[2].change_blocks[0]"
        assert exc_info.value.message == "steps[2].change_blocks[0]: missing 'file'"

    def test_missing_top_level_field(self) -> None:
        data = _response()
        del data["overview"]

        with pytest.raises(ResponseParseError) as exc_info:
            parse_response(json.dumps(data))

        assert exc_info.value.field_path == "response"

    def test_wrong_type_reports_field(self) -> None:
        data = _response()
        data["steps"][0]["change_blocks"][0]["change_block_index"] = "0"

        with pytest.raises(ResponseParseError) as exc_info:
            parse_response(json.dumps(data))

        assert exc_info.value.field_path == "steps[0].change_blocks[0].change_block_index"

    def test_one_bad_step_rejects_whole_response(self) -> None:
        data = _response()
        data["steps"][1]["title"] = 5

        with pytest.raises(ResponseParseError):
            parse_response(json.dumps(data))
