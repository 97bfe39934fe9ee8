import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from resume_screener.models.settings import EvaluatorSettings
from resume_screener.services.evaluator_client import EvaluationClient
from resume_screener.services.orchestrator import ResumeEvaluator
from resume_screener.services.screening import ScreeningService
from resume_screener.services.store import InMemoryStore
from resume_screener.validators import MAX_FILE_SIZE
from factories import FIXED_NOW, SCENARIO_BODY, completion_response, error_response

PDF_BYTES = b"%PDF-1.4 fake resume"


@pytest.fixture
def test_app():
    from resume_screener.main import app

    evaluator = ResumeEvaluator(
        client=EvaluationClient(EvaluatorSettings(api_url="https://evaluator.test/v1/chat/completions")),
        notifier=MagicMock(),
        clock=lambda: FIXED_NOW,
    )
    app.state.evaluator = evaluator
    app.state.screening = ScreeningService(InMemoryStore(), evaluator=evaluator, notifier=MagicMock())
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def upload(filename="jane_doe.pdf", content=PDF_BYTES):
    return {"resume": (filename, content, "application/pdf")}


class TestHealth:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestEvaluationsRouter:
    """Test cases for the stateless evaluation endpoint"""

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_evaluate_resume(self, mock_post, client, scenario_criteria, scenario_result):
        mock_post.return_value = completion_response(SCENARIO_BODY)

        response = client.post(
            "/api/evaluations/",
            files=upload(),
            data={"criteria": json.dumps(scenario_criteria), "language": "english"},
            headers={"Authorization": "Bearer sk-test"},
        )

        assert response.status_code == 200
        assert response.json() == scenario_result
        assert response.headers["X-Request-ID"]
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_invalid_criteria_is_400(self, mock_post, client, scenario_criteria):
        scenario_criteria["keywords"] = []

        response = client.post(
            "/api/evaluations/",
            files=upload(),
            data={"criteria": json.dumps(scenario_criteria)},
            headers={"Authorization": "Bearer sk-test"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "VALIDATION_ERROR"
        assert response.json()["error"]["details"]["reason"] == "empty_keywords"
        mock_post.assert_not_called()

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_missing_credential_is_401(self, mock_post, client, scenario_criteria):
        response = client.post(
            "/api/evaluations/",
            files=upload(),
            data={"criteria": json.dumps(scenario_criteria)},
        )

        assert response.status_code == 401
        assert response.json()["error"]["error_code"] == "AUTHENTICATION_ERROR"
        mock_post.assert_not_called()

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_evaluator_failure_is_502(self, mock_post, client, scenario_criteria):
        mock_post.return_value = error_response(401, {"error": {"message": "Incorrect API key provided"}})

        response = client.post(
            "/api/evaluations/",
            files=upload(),
            data={"criteria": json.dumps(scenario_criteria)},
            headers={"Authorization": "Bearer sk-bad"},
        )

        assert response.status_code == 502
        assert response.json()["message"] == "Incorrect API key provided"
        assert response.json()["error"]["details"]["status_code"] == 401

    def test_malformed_criteria_json_is_422(self, client):
        response = client.post(
            "/api/evaluations/",
            files=upload(),
            data={"criteria": "{not json"},
            headers={"Authorization": "Bearer sk-test"},
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("filename,content", [
        ("jane_doe.pdf", b""),
        ("jane_doe.docx", PDF_BYTES),
        ("jane_doe.pdf", b"0" * (MAX_FILE_SIZE + 1)),
    ])
    def test_rejected_uploads(self, client, scenario_criteria, filename, content):
        response = client.post(
            "/api/evaluations/",
            files=upload(filename, content),
            data={"criteria": json.dumps(scenario_criteria)},
            headers={"Authorization": "Bearer sk-test"},
        )

        assert response.status_code == 400


class TestScreeningRouter:
    """Test cases for scans, history and settings"""

    def configure(self, client, criteria):
        client.put("/api/settings/credential", json={"apiKey": "sk-test"})
        client.put("/api/settings/criteria", json=criteria)

    def test_settings_never_echo_credential(self, client):
        response = client.put("/api/settings/credential", json={"apiKey": "sk-secret"})

        assert response.status_code == 200
        assert response.json()["hasCredential"] is True
        assert "sk-secret" not in response.text
        assert "sk-secret" not in client.get("/api/settings").text

    def test_default_settings(self, client):
        data = client.get("/api/settings").json()

        assert data["hasCredential"] is False
        assert data["language"] == "english"
        assert data["criteria"]["requiredExperience"] == "1 year"

    def test_update_criteria(self, client, scenario_criteria):
        response = client.put("/api/settings/criteria", json=scenario_criteria)

        assert response.status_code == 200
        assert response.json()["criteria"] == scenario_criteria

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_scan_and_history(self, mock_post, client, scenario_criteria, scenario_result):
        mock_post.return_value = completion_response(SCENARIO_BODY)
        self.configure(client, scenario_criteria)

        first = client.post("/api/scans", files=upload("first.pdf")).json()
        second = client.post("/api/scans", files=upload("second.pdf")).json()

        assert second["documentReference"] == "second.pdf"
        assert second["result"] == scenario_result

        history = client.get("/api/history").json()
        assert [e["id"] for e in history] == [second["id"], first["id"]]

        entry = client.get(f"/api/history/{first['id']}")
        assert entry.status_code == 200
        assert entry.json()["documentReference"] == "first.pdf"

        assert client.delete("/api/history").status_code == 200
        assert client.get("/api/history").json() == []
        assert client.get(f"/api/history/{first['id']}").status_code == 404

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_scan_without_credential_is_401(self, mock_post, client, scenario_criteria):
        client.put("/api/settings/criteria", json=scenario_criteria)

        response = client.post("/api/scans", files=upload())

        assert response.status_code == 401
        mock_post.assert_not_called()
        assert client.get("/api/history").json() == []

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_language_change_reanalyses_latest_scan(self, mock_post, client, scenario_criteria):
        mock_post.return_value = completion_response(SCENARIO_BODY)
        self.configure(client, scenario_criteria)
        scanned = client.post("/api/scans", files=upload()).json()

        mock_post.return_value = completion_response("Hindi text that is not JSON")
        response = client.put("/api/settings/language", json={"language": "hindi"})

        assert response.status_code == 200
        assert response.json()["id"] == scanned["id"]
        assert response.json()["result"]["summaryFeedback"] == "Hindi text that is not JSON"
        assert "Provide all text output in Hindi language." in mock_post.call_args.kwargs["json"]["messages"][0]["content"]
        assert client.get("/api/settings").json()["language"] == "hindi"

    def test_language_change_without_scan_returns_null(self, client):
        response = client.put("/api/settings/language", json={"language": "hindi"})

        assert response.status_code == 200
        assert response.json() is None

    def test_unknown_language_is_422(self, client):
        response = client.put("/api/settings/language", json={"language": "klingon"})
        assert response.status_code == 422

    @patch("resume_screener.services.evaluator_client.requests.post")
    def test_language_change_survives_failed_reanalysis(self, mock_post, client, scenario_criteria):
        mock_post.return_value = completion_response(SCENARIO_BODY)
        self.configure(client, scenario_criteria)
        scanned = client.post("/api/scans", files=upload()).json()

        mock_post.return_value = error_response(500, {"error": {"message": "The server had an error"}})
        response = client.put("/api/settings/language", json={"language": "hindi"})

        assert response.status_code == 200
        assert response.json() is None
        assert client.get("/api/settings").json()["language"] == "hindi"
        assert client.get("/api/history").json()[0]["result"]["overallScore"] == scanned["result"]["overallScore"]
