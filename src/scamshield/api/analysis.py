"""Analysis API router.

Endpoints:
- POST /analysis
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from scamshield.analysis.engine import AnalysisResult, ScamAnalyzer
from scamshield.api.dependencies import get_analyzer

router = APIRouter(prefix="/analysis", tags=["analysis"])


class AnalysisRequest(BaseModel):
    content: str
    validate_phone: bool = False  # reject anything that is not a 10-15 digit phone number


@router.post("", response_model=AnalysisResult)
async def analyze(payload: AnalysisRequest, analyzer: ScamAnalyzer = Depends(get_analyzer)):
    """Check a message, phone number, or URL against community reports.

    Empty input or a failed phone check surfaces as a 422 through the
    application's ``ValidationError`` handler.
    """
    return await analyzer.analyze(payload.content, validate_phone=payload.validate_phone)
