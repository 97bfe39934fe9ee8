"""
Turns free-form evaluator output into a ResumeAnalysisResult.

Parsing never fails: text that is not a valid result becomes a fallback result
whose summary_feedback carries the original text unchanged.
"""
import re
from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from resume_screener.models.schemas import (
    EducationAnalysis,
    ExperienceAnalysis,
    Language,
    ResumeAnalysisResult,
)
from resume_screener.utils.exceptions import DecodeError
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

JSON_FENCE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL | re.IGNORECASE)

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ParsedOutcome:
    result: ResumeAnalysisResult


@dataclass(frozen=True)
class FallbackOutcome:
    result: ResumeAnalysisResult
    error: DecodeError


ParseOutcome = Union[ParsedOutcome, FallbackOutcome]


def extract_json_text(raw_text: str) -> str:
    match = JSON_FENCE.search(raw_text)
    if match:
        return match.group(1)
    return raw_text


def fallback_result(raw_text: str) -> ResumeAnalysisResult:
    return ResumeAnalysisResult(
        overall_score=0,
        keyword_matches=[],
        experience_analysis=ExperienceAnalysis(years=UNKNOWN, relevance=UNKNOWN, score=0),
        tech_stack_analysis=[],
        education_analysis=EducationAnalysis(degree_found=False, relevance=UNKNOWN, score=0),
        strengths=[],
        weaknesses=[],
        improvement_suggestions=[],
        summary_feedback=raw_text,
    )


def parse_outcome(raw_text: str) -> ParseOutcome:
    candidate = extract_json_text(raw_text)
    try:
        result = ResumeAnalysisResult.model_validate_json(candidate)
    except PydanticValidationError as e:
        error = DecodeError(
            f"Evaluator output is not a valid analysis result ({e.error_count()} errors)",
            details={"errors": [err["type"] for err in e.errors()]},
            cause=e,
        )
        return FallbackOutcome(result=fallback_result(raw_text), error=error)
    return ParsedOutcome(result=result)


def parse_evaluation(raw_text: str, language: Union[Language, str] = Language.ENGLISH) -> ResumeAnalysisResult:
    outcome = parse_outcome(raw_text)
    if isinstance(outcome, FallbackOutcome):
        logger.warning(
            f"Failed to parse evaluator response ({getattr(language, 'value', language)}); "
            f"returning raw text as feedback: {outcome.error.message}"
        )
    return outcome.result
