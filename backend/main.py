"""SEO Analyzer API – FastAPI app exposing the single-page analysis pipeline."""

import logging
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CORS_ORIGINS, LOG_LEVEL, PORT
from errors import AnalysisError, ErrorCategory, classify_error
from models import ClassifiedError
from pipeline import run_analysis
from schemas import AnalyzeResponse, ErrorResponse, HealthResponse

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("seo_analyzer")

app = FastAPI(
    title="SEO Analyzer API",
    description="Fetch a page and score its on-page SEO basics",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(error: ClassifiedError) -> JSONResponse:
    body = ErrorResponse(error=error.category, message=error.message)
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable request bodies are reported like any other invalid request."""
    logger.info("Rejected unparseable body on %s", request.url.path)
    error = AnalysisError(ErrorCategory.INVALID_FORMAT, "Request body must be valid JSON")
    return error_response(classify_error(error))


@app.get("/", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="ok")


@app.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        408: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
def analyze(body: Any = Body(default=None)) -> AnalyzeResponse | JSONResponse:
    """
    Pipeline: validate url -> fetch page -> extract signals -> score -> return findings.
    """
    result = run_analysis(body)
    if isinstance(result, ClassifiedError):
        return error_response(result)
    return AnalyzeResponse.from_result(result)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
