"""
Public entry point of the evaluation pipeline.

normalize -> encode -> build request -> submit -> parse
"""
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from resume_screener.helpers.encoding import build_document_payload
from resume_screener.models.schemas import Criteria, DocumentSource, Language, ResumeAnalysisResult
from resume_screener.models.settings import load_settings
from resume_screener.services.criteria import normalize_criteria
from resume_screener.services.evaluator_client import EvaluationClient
from resume_screener.services.notifier import LoggingNotifier, Notifier
from resume_screener.services.request_builder import build_evaluation_request
from resume_screener.services.result_parser import parse_evaluation
from resume_screener.utils.exceptions import AuthError, ScreenerBaseException, ValidationError
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Please add at least one keyword and one technology in the criteria"
AUTH_MESSAGE = "Please enter your OpenAI API key in settings"
FAILURE_MESSAGE = "Failed to analyze resume. Please try again."


class ResumeEvaluator:
    """
    Runs one evaluation per call. Holds no per-call state, so concurrent calls are
    independent; whichever finishes last is what the caller sees.
    """

    def __init__(
        self,
        client: Optional[EvaluationClient] = None,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client or EvaluationClient()
        self.notifier = notifier or LoggingNotifier()
        self.clock = clock

    def evaluate(
        self,
        document: DocumentSource,
        criteria: Union[Criteria, Dict[str, Any]],
        credential: Optional[str],
        language: Union[Language, str] = Language.ENGLISH,
    ) -> ResumeAnalysisResult:
        try:
            language = self._to_language(language)
            normalized = normalize_criteria(criteria)
            payload = build_document_payload(document)
            request = build_evaluation_request(normalized, payload, language, self.clock())
            raw = self.client.submit(request, credential)
        except ScreenerBaseException as exc:
            logger.error(f"Resume evaluation failed for {document.filename}: {exc.message}", extra={"error_code": exc.error_code, "details": exc.details})
            self.notifier.notify_error(self._message_for(exc))
            raise

        result = parse_evaluation(raw.content, language)
        logger.info(f"Evaluated {document.filename}: overall score {result.overall_score}")
        return result

    @staticmethod
    def _to_language(language: Union[Language, str]) -> Language:
        try:
            return Language(language)
        except ValueError as e:
            raise ValidationError(
                f"Unsupported language {language!r}",
                reason=ValidationError.INVALID_LANGUAGE,
                field="language",
                cause=e,
            ) from e

    @staticmethod
    def _message_for(exc: ScreenerBaseException) -> str:
        if isinstance(exc, ValidationError):
            return FAILURE_MESSAGE if exc.reason == ValidationError.INVALID_LANGUAGE else VALIDATION_MESSAGE
        if isinstance(exc, AuthError):
            return AUTH_MESSAGE
        return FAILURE_MESSAGE


def evaluate(
    document: DocumentSource,
    criteria: Union[Criteria, Dict[str, Any]],
    credential: Optional[str],
    language: Union[Language, str] = Language.ENGLISH,
) -> ResumeAnalysisResult:
    """Evaluate with default settings, client and notifier."""
    return ResumeEvaluator(client=EvaluationClient(load_settings())).evaluate(document, criteria, credential, language)
