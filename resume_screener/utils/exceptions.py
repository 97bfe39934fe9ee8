"""
Custom Exception Classes for the Resume Screener
"""
from typing import Dict, Any, Optional
from fastapi import HTTPException


class ScreenerBaseException(Exception):
    """Base exception for the resume screener"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ScreenerBaseException):
    """Raised when criteria or the requested language fail pre-flight validation"""

    INVALID_CRITERIA = "invalid_criteria"
    INVALID_LANGUAGE = "invalid_language"
    EMPTY_KEYWORDS = "empty_keywords"
    EMPTY_TECH_STACK = "empty_tech_stack"

    def __init__(self, message: str, reason: str, field: str = None, **kwargs):
        details = kwargs.pop('details', {})
        details['reason'] = reason
        if field:
            details['field'] = field
        self.reason = reason
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class AuthError(ScreenerBaseException):
    """Raised when no evaluator credential is supplied"""

    def __init__(self, message: str = "An API credential is required", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class TransportError(ScreenerBaseException):
    """Raised when the evaluator responds with a non-success status or is unreachable"""

    def __init__(self, message: str, status_code: Optional[int] = None, service_name: str = "evaluator", **kwargs):
        details = kwargs.pop('details', {})
        details['service_name'] = service_name
        if status_code is not None:
            details['status_code'] = status_code
        self.status_code = status_code
        super().__init__(message, error_code="TRANSPORT_ERROR", details=details, **kwargs)


class EncodingError(ScreenerBaseException):
    """Raised when a document cannot be read and encoded"""

    def __init__(self, message: str, filename: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        super().__init__(message, error_code="ENCODING_ERROR", details=details, **kwargs)


class DecodeError(ScreenerBaseException):
    """Evaluator output could not be decoded into a result; only ever absorbed by the parser"""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="DECODE_ERROR", **kwargs)


class ConfigurationError(ScreenerBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ScreenerBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        EncodingError: 400,
        AuthError: 401,
        TransportError: 502,
        ConfigurationError: 500,
        DecodeError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)
