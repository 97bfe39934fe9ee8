from typing import Any, Dict, Optional

import requests

from resume_screener.models.schemas import EvaluationRequest, RawResponse
from resume_screener.models.settings import EvaluatorSettings
from resume_screener.utils.exceptions import AuthError, TransportError
from resume_screener.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)


def build_request_body(request: EvaluationRequest, model: str, max_tokens: int) -> Dict[str, Any]:
    payload = request.document_payload
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": request.system_prompt},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": request.user_prompt},
                    {
                        "type": "file",
                        "file": {
                            "filename": payload.filename,
                            "file_data": payload.data_uri,
                        },
                    },
                ],
            },
        ],
        "max_tokens": max_tokens,
    }


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"API request failed with status {resp.status_code}"


def _to_raw_response(resp: requests.Response) -> RawResponse:
    # Anything that is not a chat-completion envelope is handed on as raw text
    try:
        data = resp.json()
        message = data["choices"][0]["message"]
        content = message["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        logger.warning("Evaluator response is not a chat completion envelope; passing body through as text")
        return RawResponse(status_code=resp.status_code, content=resp.text)

    if not isinstance(content, str):
        # null content on a refusal; the refusal text, if any, is what the user should read
        refusal = message.get("refusal")
        logger.warning(f"Evaluator returned no text content (refusal: {bool(refusal)})")
        content = refusal if isinstance(refusal, str) else ""
    return RawResponse(
        status_code=resp.status_code,
        content=content,
        model=data.get("model"),
        usage=data.get("usage"),
    )


class EvaluationClient:
    """Sends one evaluation request to the chat-completions endpoint. Never retries."""

    def __init__(self, settings: Optional[EvaluatorSettings] = None):
        self.settings = settings or EvaluatorSettings()

    def submit(self, request: EvaluationRequest, credential: Optional[str]) -> RawResponse:
        if not credential or not credential.strip():
            raise AuthError("Please enter your OpenAI API key in settings")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {credential.strip()}",
        }
        body = build_request_body(request, self.settings.model_name, self.settings.max_tokens)

        try:
            with PerformanceMonitor("evaluator round-trip", logger=logger, threshold_ms=30000):
                resp = requests.post(
                    self.settings.api_url,
                    headers=headers,
                    json=body,
                    timeout=self.settings.timeout,
                )
        except requests.RequestException as e:
            raise TransportError(f"Could not reach the evaluator: {e}", status_code=None, cause=e) from e

        if not resp.ok:
            message = _error_message(resp)
            logger.error(f"Evaluator returned {resp.status_code}: {message}")
            raise TransportError(message, status_code=resp.status_code)

        return _to_raw_response(resp)
