"""Analysis pipeline: validate -> fetch -> extract -> score.

Callable from any transport (HTTP handler, tests, scripts). Holds no state
between calls; any failure short-circuits the remaining stages.
"""

import logging
from typing import Any, Callable

from errors import AnalysisError, classify_error
from extractor import extract_signals
from models import AnalysisResponse, ClassifiedError
from schemas import validate_analysis_request
from scorer import score_signals
from scraper import fetch_html

logger = logging.getLogger("seo_analyzer.pipeline")


def analyze_page(body: Any, fetch: Callable[[str], str] | None = None) -> AnalysisResponse:
    """
    Run the full pipeline for a raw request body.
    Raises AnalysisError (or an unexpected exception) on failure.
    """
    request = validate_analysis_request(body)
    html = (fetch or fetch_html)(request.url)
    signals = extract_signals(html, request.url)
    result = score_signals(signals)
    logger.info("Analyzed %s: score=%d issues=%d", request.url, result.score, len(result.issues))
    return AnalysisResponse.from_score(request.url, result)


def run_analysis(
    body: Any,
    fetch: Callable[[str], str] | None = None,
) -> AnalysisResponse | ClassifiedError:
    """Run the pipeline and return either the response or its classified error."""
    try:
        return analyze_page(body, fetch=fetch)
    except AnalysisError as exc:
        classified = classify_error(exc)
        logger.info("Analysis failed [%s] -> %d %s", exc.category.value, classified.status_code, classified.category)
        return classified
    except Exception as exc:
        logger.exception("Unexpected error during analysis")
        return classify_error(exc)
