from unittest.mock import MagicMock, patch

import pytest

from resume_screener.models.settings import EvaluatorSettings
from resume_screener.services.evaluator_client import EvaluationClient
from resume_screener.services.orchestrator import (
    AUTH_MESSAGE,
    FAILURE_MESSAGE,
    VALIDATION_MESSAGE,
    ResumeEvaluator,
    evaluate,
)
from resume_screener.utils.exceptions import AuthError, EncodingError, TransportError, ValidationError
from factories import FIXED_NOW, SCENARIO_BODY, completion_response, error_response


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def evaluator(notifier):
    client = EvaluationClient(EvaluatorSettings(api_url="https://evaluator.test/v1/chat/completions"))
    return ResumeEvaluator(client=client, notifier=notifier, clock=lambda: FIXED_NOW)


class TestResumeEvaluator:
    """Test cases for the evaluation pipeline"""

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_successful_evaluation(self, mock_post, evaluator, notifier, resume_document, scenario_criteria, scenario_result):
        mock_post.return_value = completion_response(SCENARIO_BODY)

        result = evaluator.evaluate(resume_document, scenario_criteria, "sk-test", "english")

        assert result.overall_score == 82
        assert result.to_wire() == scenario_result
        assert mock_post.call_count == 1
        notifier.notify_error.assert_not_called()

        body = mock_post.call_args.kwargs["json"]
        assert body["messages"][1]["content"][1]["file"]["filename"] == "jane_doe.pdf"
        assert "today is 2025-02-01" in body["messages"][0]["content"]

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_empty_keywords_never_reach_network(self, mock_post, evaluator, notifier, resume_document, scenario_criteria):
        scenario_criteria["keywords"] = [""]

        with pytest.raises(ValidationError) as exc_info:
            evaluator.evaluate(resume_document, scenario_criteria, "sk-test", "english")

        assert exc_info.value.reason == "empty_keywords"
        mock_post.assert_not_called()
        notifier.notify_error.assert_called_once_with(VALIDATION_MESSAGE)

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_missing_credential_never_reaches_network(self, mock_post, evaluator, notifier, resume_document, scenario_criteria):
        with pytest.raises(AuthError):
            evaluator.evaluate(resume_document, scenario_criteria, None, "english")

        mock_post.assert_not_called()
        notifier.notify_error.assert_called_once_with(AUTH_MESSAGE)

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_validation_checked_before_credential(self, mock_post, evaluator, resume_document, scenario_criteria):
        scenario_criteria["techStack"] = []

        with pytest.raises(ValidationError):
            evaluator.evaluate(resume_document, scenario_criteria, None, "english")

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_non_json_reply_becomes_fallback(self, mock_post, evaluator, notifier, resume_document, scenario_criteria):
        text = "I couldn't process this as JSON, sorry."
        mock_post.return_value = completion_response(text)

        result = evaluator.evaluate(resume_document, scenario_criteria, "sk-test", "hindi")

        assert result.overall_score == 0
        assert result.summary_feedback == text
        notifier.notify_error.assert_not_called()

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_transport_failure_is_raised_and_notified(self, mock_post, evaluator, notifier, resume_document, scenario_criteria):
        mock_post.return_value = error_response(429, {"error": {"message": "Rate limit reached"}})

        with pytest.raises(TransportError) as exc_info:
            evaluator.evaluate(resume_document, scenario_criteria, "sk-test", "english")

        assert exc_info.value.status_code == 429
        notifier.notify_error.assert_called_once_with(FAILURE_MESSAGE)

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_unreadable_document(self, mock_post, evaluator, notifier, scenario_criteria, tmp_path):
        from resume_screener.models.schemas import DocumentSource
        missing = DocumentSource(filename="missing.pdf", source=tmp_path / "missing.pdf")

        with pytest.raises(EncodingError):
            evaluator.evaluate(missing, scenario_criteria, "sk-test", "english")

        mock_post.assert_not_called()
        notifier.notify_error.assert_called_once_with(FAILURE_MESSAGE)

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_unknown_language_is_validation_error(self, mock_post, evaluator, notifier, resume_document, scenario_criteria):
        with pytest.raises(ValidationError) as exc_info:
            evaluator.evaluate(resume_document, scenario_criteria, "sk-test", "klingon")

        assert exc_info.value.reason == "invalid_language"
        assert exc_info.value.details["field"] == "language"
        mock_post.assert_not_called()
        notifier.notify_error.assert_called_once_with(FAILURE_MESSAGE)

    @pytest.mark.parametrize("criteria", [
        {"keywords": None, "techStack": ["docker"]},
        {"keywords": ["python"], "techStack": "docker"},
        {"keywords": ["python"], "techStack": ["docker"], "degree": 3},
    ])
    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_malformed_criteria_is_validation_error(self, mock_post, evaluator, notifier, resume_document, criteria):
        with pytest.raises(ValidationError) as exc_info:
            evaluator.evaluate(resume_document, criteria, "sk-test", "english")

        assert exc_info.value.reason == "invalid_criteria"
        mock_post.assert_not_called()
        notifier.notify_error.assert_called_once_with(VALIDATION_MESSAGE)


class TestModuleLevelEvaluate:
    """Test cases for the default-wired evaluate() entry point"""

    @patch("resume_screener.services.evaluator_client.requests.post")
    @patch("resume_screener.services.orchestrator.load_settings")
    def test_evaluate_with_default_wiring(self, mock_settings, mock_post, resume_document, scenario_criteria, scenario_result):
        mock_settings.return_value = EvaluatorSettings(api_url="https://evaluator.test/v1/chat/completions", model_name="gpt-4o-mini")
        mock_post.return_value = completion_response(SCENARIO_BODY)

        result = evaluate(resume_document, scenario_criteria, "sk-test", "english")

        assert result.to_wire() == scenario_result
        args, kwargs = mock_post.call_args
        assert args[0] == "https://evaluator.test/v1/chat/completions"
        assert kwargs["json"]["model"] == "gpt-4o-mini"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @patch("resume_screener.services.evaluator_client.requests.post")
    @patch("resume_screener.services.orchestrator.load_settings")
    def test_evaluate_raises_auth_error_without_credential(self, mock_settings, mock_post, resume_document, scenario_criteria):
        mock_settings.return_value = EvaluatorSettings()

        with pytest.raises(AuthError):
            evaluate(resume_document, scenario_criteria, "", "english")

        mock_post.assert_not_called()
