from typing import Any, Dict, List, Union

from pydantic import ValidationError as PydanticValidationError

from resume_screener.models.schemas import Criteria, NormalizedCriteria
from resume_screener.utils.exceptions import ValidationError
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)


def _clean_entries(values: List[str]) -> List[str]:
    # trim, then drop entries that end up blank
    return [v.strip() for v in values if v and v.strip()]


def normalize_criteria(raw: Union[Criteria, Dict[str, Any]]) -> NormalizedCriteria:
    """
    Validate user-entered criteria before anything touches the network.

    Raises:
        ValidationError: reason "invalid_criteria", "empty_keywords" or "empty_tech_stack"
    """
    if isinstance(raw, Criteria):
        criteria = raw
    else:
        try:
            criteria = Criteria.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            logger.info(f"Rejected criteria: {field or 'criteria'} {first['msg']}")
            raise ValidationError(
                f"Criteria are malformed: {first['msg']}",
                reason=ValidationError.INVALID_CRITERIA,
                field=field,
                cause=e,
            ) from e

    keywords = _clean_entries(criteria.keywords)
    if not keywords:
        logger.info("Rejected criteria: no keywords after trimming")
        raise ValidationError(
            "Please add at least one keyword",
            reason=ValidationError.EMPTY_KEYWORDS,
            field="keywords",
        )

    tech_stack = _clean_entries(criteria.tech_stack)
    if not tech_stack:
        logger.info("Rejected criteria: no tech stack entries after trimming")
        raise ValidationError(
            "Please add at least one technology",
            reason=ValidationError.EMPTY_TECH_STACK,
            field="techStack",
        )

    return NormalizedCriteria(
        keywords=keywords,
        required_experience=criteria.required_experience,
        tech_stack=tech_stack,
        degree=criteria.degree,
        additional_attributes=criteria.additional_attributes,
    )


def has_valid_criteria(raw: Union[Criteria, Dict[str, Any]]) -> bool:
    try:
        normalize_criteria(raw)
    except ValidationError:
        return False
    return True
