"""
Turns the model's free-text reply into a MovieResult that is always populated.

The reply is expected to hold one JSON object, often wrapped in prose or a
markdown fence. Decoding produces one of three outcomes:

  * Decoded            - a non-empty result read from the outermost {...} span
  * NoStructuredRegion - no usable {...} span, or it decoded to nothing
  * DecodeFault        - the span was there but could not be decoded

normalize_answer() maps each outcome onto a result and never raises.
"""

import json
import logging
from dataclasses import dataclass

from app.models import Confidence, MovieResult

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"

# lower-cased wire name -> wire name, for case-insensitive key matching
_FIELD_NAMES = {
    (field.alias or name).lower(): field.alias or name
    for name, field in MovieResult.model_fields.items()
}
_CONFIDENCE_VALUES = {c.value for c in Confidence}


@dataclass(frozen=True)
class Decoded:
    result: MovieResult


@dataclass(frozen=True)
class NoStructuredRegion:
    pass


@dataclass(frozen=True)
class DecodeFault:
    message: str


ParseOutcome = Decoded | NoStructuredRegion | DecodeFault


def extract_json_region(raw: str) -> str | None:
    """Return the text from the first '{' to the last '}' inclusive, if any."""
    start = raw.find("{")
    end = raw.rfind("}")
    if start < 0 or end <= start:
        return None
    return raw[start:end + 1]


def _match_fields(payload: dict) -> dict:
    matched = {}
    for key, value in payload.items():
        name = _FIELD_NAMES.get(str(key).lower())
        if name is not None:
            matched[name] = value
    return matched


def decode_answer(raw: str) -> ParseOutcome:
    region = extract_json_region(raw or "")
    if region is None:
        return NoStructuredRegion()

    try:
        payload = json.loads(region)
        # lone surrogate escapes decode but cannot be sent back as UTF-8
        json.dumps(payload, ensure_ascii=False).encode("utf-8")
        result = MovieResult.model_validate(_match_fields(payload))
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError, UnicodeEncodeError and ValidationError are all ValueErrors
        return DecodeFault(str(exc))

    if result.is_empty():
        return NoStructuredRegion()
    return Decoded(result)


def fallback_result(title: str, notes: str) -> MovieResult:
    return MovieResult(
        title=title,
        release_year=UNKNOWN,
        director=UNKNOWN,
        cast=[],
        imdb_rating=NOT_AVAILABLE,
        confidence=Confidence.LOW.value,
        notes=notes,
    )


def normalize_answer(raw: str) -> MovieResult:
    outcome = decode_answer(raw)

    if isinstance(outcome, Decoded):
        if outcome.result.confidence not in _CONFIDENCE_VALUES:
            logger.warning(
                "Model returned confidence outside %s: %r",
                sorted(_CONFIDENCE_VALUES), outcome.result.confidence,
            )
        return outcome.result

    if isinstance(outcome, NoStructuredRegion):
        logger.warning("Failed to parse JSON response, creating fallback result")
        return fallback_result(UNKNOWN, f"Failed to parse response. Raw answer: {raw}")

    if isinstance(outcome, DecodeFault):
        logger.error("Error parsing movie result: %s", outcome.message)
        return fallback_result("Error", f"Error parsing response: {outcome.message}")

    raise TypeError(f"Unhandled parse outcome: {outcome!r}")
