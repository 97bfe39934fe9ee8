from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, computed_field
from pydantic.alias_generators import to_camel

PDF_MIME_TYPE = "application/pdf"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Language(str, Enum):
    """Output language requested from the evaluator"""
    ENGLISH = "english"
    HINDI = "hindi"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


# -------- Criteria --------
class Criteria(CamelModel):
    """Job criteria as entered by the user; may still contain blank entries"""
    keywords: List[str] = Field(default_factory=list)
    required_experience: str = ""
    tech_stack: List[str] = Field(default_factory=list)
    degree: str = ""
    additional_attributes: str = ""


class NormalizedCriteria(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    keywords: List[str]
    required_experience: str
    tech_stack: List[str]
    degree: str
    additional_attributes: str = ""


DEFAULT_CRITERIA = Criteria(
    keywords=[""],
    required_experience="1 year",
    tech_stack=[""],
    degree="Bachelor's degree",
    additional_attributes="",
)


# -------- Documents --------
class DocumentSource(BaseModel):
    """A resume to evaluate: bytes, a filesystem path or a readable binary stream"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    filename: str
    source: Any


class DocumentPayload(CamelModel):
    filename: str
    data: str
    mime_type: str = PDF_MIME_TYPE

    @computed_field
    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


# -------- Request --------
class TemporalContext(CamelModel):
    now: datetime
    current_month: int
    current_year: int
    anchor: datetime
    elapsed_months: float
    elapsed_years: float


class EvaluationRequest(CamelModel):
    document_payload: DocumentPayload
    criteria_summary: str
    target_language: Language
    temporal_context: TemporalContext
    system_prompt: str
    user_prompt: str


class RawResponse(CamelModel):
    status_code: int
    content: str
    model: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None


# -------- Result --------
# Scalars use strict types: "82" is not a score and "true" is not a boolean.
Score = Annotated[StrictInt, Field(ge=0, le=100)]


class KeywordMatch(CamelModel):
    keyword: StrictStr
    found: StrictBool
    context: Optional[StrictStr] = None


class ExperienceAnalysis(CamelModel):
    years: StrictStr
    relevance: StrictStr
    score: Score


class TechStackMatch(CamelModel):
    tech: StrictStr
    found: StrictBool
    expertise: Optional[StrictStr] = None


class EducationAnalysis(CamelModel):
    degree_found: StrictBool
    relevance: StrictStr
    score: Score


class ResumeAnalysisResult(CamelModel):
    overall_score: Score
    keyword_matches: List[KeywordMatch]
    experience_analysis: ExperienceAnalysis
    tech_stack_analysis: List[TechStackMatch]
    education_analysis: EducationAnalysis
    strengths: List[StrictStr]
    weaknesses: List[StrictStr]
    improvement_suggestions: List[StrictStr]
    summary_feedback: StrictStr

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict holding exactly the fields that were set"""
        return self.model_dump(by_alias=True, exclude_unset=True)


# -------- History / settings --------
class HistoryEntry(CamelModel):
    id: str
    timestamp: datetime
    document_reference: str
    result: ResumeAnalysisResult


class CredentialUpdate(CamelModel):
    api_key: str


class LanguageUpdate(CamelModel):
    language: Language


class SettingsView(CamelModel):
    has_credential: bool
    language: Language
    criteria: Criteria
