from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from resume_screener.models.schemas import Criteria, Language, ResumeAnalysisResult
from resume_screener.services.orchestrator import ResumeEvaluator
from resume_screener.utils.logging_config import get_logger
from resume_screener.validators import validate_resume_file

router = APIRouter()
logger = get_logger(__name__)


def get_evaluator(request: Request) -> ResumeEvaluator:
    return request.app.state.evaluator


def bearer_credential(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


@router.post("/", response_model=ResumeAnalysisResult, response_model_exclude_unset=True)
async def evaluate_resume(
    resume: UploadFile = File(...),
    criteria: str = Form(..., description="Criteria as a JSON object"),
    language: Language = Form(Language.ENGLISH),
    authorization: Optional[str] = Header(None),
    evaluator: ResumeEvaluator = Depends(get_evaluator),
):
    """Evaluate one resume against the given criteria; nothing is stored"""
    try:
        parsed_criteria = Criteria.model_validate_json(criteria)
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid criteria: {e.errors()[0]['msg']}")

    document = await validate_resume_file(resume)
    logger.info(f"Evaluating {document.filename} in {language.value}")
    return await run_in_threadpool(
        evaluator.evaluate, document, parsed_criteria, bearer_credential(authorization), language
    )
