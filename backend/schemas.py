"""Request validation and pydantic schemas for API responses."""

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

from errors import AnalysisError, ErrorCategory
from models import AnalysisRequest, AnalysisResponse

ALLOWED_SCHEMES = {"http", "https"}


def validate_analysis_request(body: Any) -> AnalysisRequest:
    """
    Validate the raw JSON body of POST /api/analyze.
    Raises AnalysisError with a validation category on any problem.
    """
    url = body.get("url") if isinstance(body, dict) else None

    if url is None or url == "":
        raise AnalysisError(ErrorCategory.MISSING_FIELD, "URL is required in request body")

    if not isinstance(url, str):
        raise AnalysisError(ErrorCategory.INVALID_TYPE, "URL must be a string")

    try:
        parsed = urlparse(url)
        # Accessing the port validates it.
        parsed.port
    except ValueError:
        raise AnalysisError(ErrorCategory.INVALID_FORMAT, "URL must be a valid URL") from None

    if not parsed.scheme:
        raise AnalysisError(ErrorCategory.INVALID_FORMAT, "URL must be a valid URL")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise AnalysisError(ErrorCategory.INVALID_PROTOCOL, "URL must use http or https protocol")

    if not parsed.hostname or any(ch.isspace() for ch in parsed.netloc):
        raise AnalysisError(ErrorCategory.INVALID_FORMAT, "URL must be a valid URL")

    return AnalysisRequest(url=url)


class AnalyzeResponse(BaseModel):
    """Response for POST /api/analyze."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    seo_score: int = Field(alias="seoScore", ge=0, le=100)
    checks: list[str]
    issues: list[str]
    passed_checks: list[str] = Field(alias="passedChecks")

    @classmethod
    def from_result(cls, result: AnalysisResponse) -> "AnalyzeResponse":
        return cls(
            url=result.url,
            seo_score=result.seo_score,
            checks=list(result.checks),
            issues=list(result.issues),
            passed_checks=list(result.passed_checks),
        )


class ErrorResponse(BaseModel):
    """Body of every non-200 response."""

    error: str
    message: str


class HealthResponse(BaseModel):
    status: str
