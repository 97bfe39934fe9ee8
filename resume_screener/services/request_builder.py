"""
Composes the outbound evaluation request from criteria, document and language.
"""
from datetime import datetime, timedelta
from typing import Union

from resume_screener.helpers.prompts import (
    CRITERIA_TEMPLATE,
    LANGUAGE_FIELDS_INSTRUCTION,
    LANGUAGE_INSTRUCTION,
    SYSTEM_PROMPT,
    USER_PROMPT,
)
from resume_screener.models.schemas import (
    DocumentPayload,
    EvaluationRequest,
    Language,
    NormalizedCriteria,
    TemporalContext,
)

# Fixed start of the worked "<month> - Present" example in the system prompt
EXPERIENCE_ANCHOR = (2023, 8, 1)

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


def render_criteria_summary(criteria: NormalizedCriteria) -> str:
    """All five labels are always present, even for empty fields."""
    return CRITERIA_TEMPLATE.format(
        keywords=", ".join(criteria.keywords),
        required_experience=criteria.required_experience,
        tech_stack=", ".join(criteria.tech_stack),
        degree=criteria.degree,
        additional_attributes=criteria.additional_attributes,
    )


def build_temporal_context(now: datetime) -> TemporalContext:
    anchor = datetime(*EXPERIENCE_ANCHOR, tzinfo=now.tzinfo)
    elapsed = now - anchor
    return TemporalContext(
        now=now,
        current_month=now.month,
        current_year=now.year,
        anchor=anchor,
        elapsed_months=round(elapsed / timedelta(days=DAYS_PER_MONTH), 1),
        elapsed_years=round(elapsed / timedelta(days=DAYS_PER_YEAR), 1),
    )


def build_system_prompt(temporal: TemporalContext, language: Language) -> str:
    return SYSTEM_PROMPT.format(
        current_month=temporal.current_month,
        current_year=temporal.current_year,
        anchor_label=temporal.anchor.strftime("%b %Y"),
        anchor_long=temporal.anchor.strftime("%B %Y"),
        elapsed_months=temporal.elapsed_months,
        elapsed_years=temporal.elapsed_years,
        today=temporal.now.date().isoformat(),
        language_instruction=LANGUAGE_INSTRUCTION.format(language=language.display_name),
    )


def build_user_prompt(criteria_summary: str, language: Language) -> str:
    return USER_PROMPT.format(
        criteria_summary=criteria_summary,
        language_fields_instruction=LANGUAGE_FIELDS_INSTRUCTION.format(language=language.display_name),
    )


def build_evaluation_request(
    criteria: NormalizedCriteria,
    document_payload: DocumentPayload,
    language: Union[Language, str],
    now: datetime,
) -> EvaluationRequest:
    language = Language(language)
    temporal = build_temporal_context(now)
    summary = render_criteria_summary(criteria)

    return EvaluationRequest(
        document_payload=document_payload,
        criteria_summary=summary,
        target_language=language,
        temporal_context=temporal,
        system_prompt=build_system_prompt(temporal, language),
        user_prompt=build_user_prompt(summary, language),
    )
