"""
Evaluator Settings for Configuration Management
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from resume_screener.utils.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o"


class EvaluatorSettings(BaseModel):
    """Settings for the external evaluator endpoint"""
    api_url: str = Field(default=DEFAULT_API_URL, description="Chat completions endpoint")
    model_name: str = Field(default=DEFAULT_MODEL, description="Multimodal model identifier")
    max_tokens: int = Field(default=2000, ge=1, le=32000, description="Maximum tokens to generate")
    timeout: float = Field(default=120.0, gt=0, le=600, description="Transport timeout in seconds")
    default_credential: Optional[str] = Field(default=None, description="Credential used to seed the screening session")

    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v):
        if not v.startswith(("https://", "http://")):
            raise ValueError('api_url must be an http(s) URL')
        return v

    @field_validator('default_credential')
    @classmethod
    def blank_credential_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


def load_settings() -> EvaluatorSettings:
    """Build settings from the environment (and a .env file if present)"""
    load_dotenv()

    raw = {
        "api_url": os.getenv("EVALUATOR_API_URL", DEFAULT_API_URL),
        "model_name": os.getenv("EVALUATOR_MODEL", DEFAULT_MODEL),
        "max_tokens": os.getenv("EVALUATOR_MAX_TOKENS", "2000"),
        "timeout": os.getenv("EVALUATOR_TIMEOUT", "120"),
        "default_credential": os.getenv("OPENAI_API_KEY"),
    }
    try:
        return EvaluatorSettings(**raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        key = str(first["loc"][0]) if first.get("loc") else None
        raise ConfigurationError(
            f"Invalid evaluator configuration: {first['msg']}",
            config_key=key,
            config_value=raw.get(key) if key else None,
            cause=e,
        ) from e
