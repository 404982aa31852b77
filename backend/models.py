"""Data models and types used across the backend.

Request/response schemas for the HTTP layer are in schemas.py.
Types for extractor, scorer and error output live here.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisRequest:
    """Validated inbound request."""

    url: str


@dataclass(frozen=True)
class SeoSignals:
    """Structured output from the HTML extractor."""

    title: str | None
    meta_description: str | None
    h1_count: int
    total_images: int
    images_missing_alt: int
    total_internal_links: int
    uses_https: bool


@dataclass(frozen=True)
class ScoreResult:
    """Score plus ordered pass/fail feedback."""

    score: int
    passed_checks: tuple[str, ...]
    issues: tuple[str, ...]


@dataclass(frozen=True)
class AnalysisResponse:
    """Successful analysis returned to the caller."""

    url: str
    seo_score: int
    checks: tuple[str, ...]
    issues: tuple[str, ...]
    passed_checks: tuple[str, ...]

    @classmethod
    def from_score(cls, url: str, result: ScoreResult) -> "AnalysisResponse":
        return cls(
            url=url,
            seo_score=result.score,
            checks=result.passed_checks + result.issues,
            issues=result.issues,
            passed_checks=result.passed_checks,
        )


@dataclass(frozen=True)
class ClassifiedError:
    """Public shape of any failure: HTTP status, label and message."""

    status_code: int
    category: str
    message: str
