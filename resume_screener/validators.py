import os

from fastapi import HTTPException, UploadFile

from resume_screener.models.schemas import DocumentSource
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_EXTENSIONS = ['.pdf']


async def validate_resume_file(file: UploadFile) -> DocumentSource:
    """
    Reads an uploaded resume fully and checks its size and type.

    Returns:
        DocumentSource holding the file's bytes

    Raises:
        HTTPException: 400 if the file is empty, too large or not a PDF
    """
    content = await file.read()
    file_size = len(content)
    filename = file.filename or "resume.pdf"

    if file_size == 0:
        logger.warning(f"Empty file uploaded: {filename}")
        raise HTTPException(
            status_code=400,
            detail="File is empty. Please upload a valid resume."
        )

    if file_size > MAX_FILE_SIZE:
        logger.warning(f"File too large: {filename} ({file_size / 1024 / 1024:.2f} MB)")
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {MAX_FILE_SIZE / 1024 / 1024:.0f} MB. Your file is {file_size / 1024 / 1024:.2f} MB."
        )

    file_ext = os.path.splitext(filename)[1].lower()
    if file_ext not in ALLOWED_EXTENSIONS:
        logger.warning(f"Invalid file type: {filename} ({file_ext})")
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type '{file_ext}'. Allowed formats: {', '.join(ALLOWED_EXTENSIONS)}"
        )

    logger.info(f"File validated: {filename} ({file_size / 1024:.2f} KB)")
    return DocumentSource(filename=filename, source=content)
