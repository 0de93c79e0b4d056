"""
Decoding and validation of provider payloads.

``parse_strict`` is the single repair boundary: a direct decode, then one
retry after light structural repair. ``QuizParser`` layers quiz-shape
validation on top of it.
"""
import json
import logging
import re
from typing import Any, Callable, List

from pydantic import ValidationError

from app.core.agents.quiz.sanitizer import sanitize_response
from app.core.agents.quiz.schemas import GeneratedQuiz, Question
from app.core.exceptions import InvalidJsonError, InvalidQuizFormatError

logger = logging.getLogger(__name__)

_STRING = r'(?P<string>"(?:[^"\\]|\\.)*")'


def _outside_strings(pattern: str) -> "re.Pattern[str]":
    # Double-quoted strings match first and are copied through untouched
    return re.compile(f"{_STRING}|{pattern}")


_SINGLE_QUOTED_RE = _outside_strings(r"(?<=[{\[,:])(?P<space>\s*)'(?P<inner>(?:[^'\\]|\\.)*)'")
_BARE_KEY_RE = _outside_strings(r"(?P<head>[{,]\s*)(?P<key>[A-Za-z_][A-Za-z0-9_]*)(?P<tail>\s*:)")
_MISSING_OBJECT_COMMA_RE = _outside_strings(r"\}(?P<gap>\s*)\{")
_MISSING_STRING_COMMA_RE = re.compile(_STRING + r'(?P<gap>\s*\n\s*(?="))?')
_TRAILING_COMMA_RE = _outside_strings(r",(?P<gap>\s*[}\]])")


def _skip_strings(replace: Callable[["re.Match[str]"], str]) -> Callable[["re.Match[str]"], str]:
    def _sub(match: "re.Match[str]") -> str:
        if match.group("string") is not None:
            return match.group("string")
        return replace(match)
    return _sub


def _requote(match: "re.Match[str]") -> str:
    inner = match.group("inner").replace("\\'", "'")
    return match.group("space") + json.dumps(inner, ensure_ascii=False)


def _join_strings(match: "re.Match[str]") -> str:
    gap = match.group("gap")
    return match.group("string") + ("," + gap if gap else "")


def repair_json(text: str) -> str:
    """
    Apply heuristic fixes for the usual near-JSON mistakes.

    Text inside double-quoted strings is never rewritten.
    """
    fixed = _SINGLE_QUOTED_RE.sub(_skip_strings(_requote), text)
    fixed = _BARE_KEY_RE.sub(
        _skip_strings(lambda m: f'{m.group("head")}"{m.group("key")}"{m.group("tail")}'), fixed
    )
    fixed = _MISSING_OBJECT_COMMA_RE.sub(_skip_strings(lambda m: "}," + m.group("gap") + "{"), fixed)
    fixed = _MISSING_STRING_COMMA_RE.sub(_join_strings, fixed)
    fixed = _TRAILING_COMMA_RE.sub(_skip_strings(lambda m: m.group("gap")), fixed)
    return fixed


def parse_strict(text: str) -> Any:
    """
    Decode a JSON candidate, repairing it once if needed.

    Raises:
        InvalidJsonError: If the text does not decode even after repair
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.info(f"Direct JSON parse failed ({e.msg}), attempting repair")

    try:
        return json.loads(repair_json(text))
    except json.JSONDecodeError as e:
        raise InvalidJsonError(f"Could not decode JSON after repair: {e.msg} at position {e.pos}") from e


class QuizParser:
    """
    Turns a sanitized provider payload into validated questions.
    """

    def parse(self, candidate: str) -> List[Question]:
        """
        Validate a JSON candidate as a quiz.

        Args:
            candidate: Output of ``sanitize_response``

        Returns:
            Questions in the order the provider returned them

        Raises:
            InvalidQuizFormatError: If decoding or structural validation fails
        """
        try:
            payload = parse_strict(candidate)
        except InvalidJsonError as e:
            raise InvalidQuizFormatError(str(e)) from e

        if not isinstance(payload, dict):
            raise InvalidQuizFormatError("Invalid quiz structure: expected a JSON object")

        try:
            quiz = GeneratedQuiz.model_validate(payload)
        except ValidationError as e:
            raise InvalidQuizFormatError(f"Invalid quiz structure: {self._describe(e)}") from e

        logger.info(f"Parsed {len(quiz.questions)} questions")
        return quiz.questions

    def parse_response(self, raw: str) -> List[Question]:
        """Sanitize raw provider text, then parse it."""
        return self.parse(sanitize_response(raw))

    @staticmethod
    def _describe(error: ValidationError) -> str:
        issues = []
        for item in error.errors()[:3]:
            location = ".".join(str(part) for part in item["loc"]) or "payload"
            issues.append(f"{location}: {item['msg']}")
        return "; ".join(issues)
