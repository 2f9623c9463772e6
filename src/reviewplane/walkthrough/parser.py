"""Reviewer response parsing.

The reviewer may wrap its JSON in prose or code fences; the object is taken
from the first ``{`` to the last ``}``. A response with any invalid field is
rejected as a whole.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from reviewplane.core.errors import ResponseParseError
from reviewplane.walkthrough.models import BlockRef, Walkthrough, WalkthroughStep


class _BlockRefPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    file: str
    change_block_index: int


class _StepPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    title: str
    explanation: str
    change_blocks: list[_BlockRefPayload]


class _ResponsePayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    overview: str
    steps: list[_StepPayload]


def extract_json_object(output: str) -> str:
    start = output.find("{")
    end = output.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ResponseParseError.no_json()
    return output[start : end + 1]


def format_loc(loc: tuple[int | str, ...]) -> str:
    """Render a validation location as ``steps[2].change_blocks[0]``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else part
    return path


def _field_error(exc: ValidationError) -> ResponseParseError:
    err = exc.errors()[0]
    loc = tuple(err["loc"])
    if err["type"] == "missing" and loc:
        parent, name = loc[:-1], loc[-1]
        return ResponseParseError.invalid_field(
            format_loc(parent) or "response", f"missing '{name}'"
        )
    return ResponseParseError.invalid_field(format_loc(loc) or "response", err["msg"])


def parse_walkthrough(data: Any) -> Walkthrough:
    """Validate decoded JSON and build a Walkthrough."""
    try:
        payload = _ResponsePayload.model_validate(data)
    except ValidationError as e:
        raise _field_error(e) from e
    return Walkthrough(
        overview=payload.overview,
        steps=tuple(
            WalkthroughStep(
                title=step.title,
                explanation=step.explanation,
                change_block_refs=tuple(
                    BlockRef(file=ref.file, change_block_index=ref.change_block_index)
                    for ref in step.change_blocks
                ),
            )
            for step in payload.steps
        ),
    )


def parse_response(output: str) -> Walkthrough:
    """Parse raw reviewer output.

    Raises:
        ResponseParseError: No JSON object, undecodable JSON, or an invalid
            field (with its path, e.g. ``steps[2].change_blocks[0]: missing 'file'``).
    """
    raw = extract_json_object(output)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResponseParseError.invalid_json(str(e)) from e
    return parse_walkthrough(data)
