import base64
from pathlib import Path
from typing import Any, Union

from resume_screener.models.schemas import DocumentPayload, DocumentSource, PDF_MIME_TYPE
from resume_screener.utils.exceptions import EncodingError
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

BinarySource = Union[bytes, bytearray, str, Path, Any]


def read_bytes(source: BinarySource) -> bytes:
    """Buffer the whole document in memory."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    if hasattr(source, "read"):
        data = source.read()
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"stream returned {type(data).__name__}, expected bytes")
        return bytes(data)
    raise TypeError(f"unsupported document source: {type(source).__name__}")


def encode_document(source: BinarySource, filename: str = None) -> str:
    try:
        data = read_bytes(source)
    except (OSError, TypeError, ValueError) as e:
        raise EncodingError(f"Could not read document: {e}", filename=filename, cause=e) from e
    logger.debug(f"Encoded document {filename or '<anonymous>'} ({len(data)} bytes)")
    return base64.b64encode(data).decode("ascii")


def build_document_payload(document: DocumentSource) -> DocumentPayload:
    return DocumentPayload(
        filename=document.filename,
        data=encode_document(document.source, filename=document.filename),
        mime_type=PDF_MIME_TYPE,
    )


def buffer_document(document: DocumentSource) -> DocumentSource:
    """Copy of the document whose source is plain bytes, so it can be encoded more than once."""
    try:
        data = read_bytes(document.source)
    except (OSError, TypeError, ValueError) as e:
        raise EncodingError(f"Could not read document: {e}", filename=document.filename, cause=e) from e
    return DocumentSource(filename=document.filename, source=data)
