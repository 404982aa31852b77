import pytest

from errors import AnalysisError, ErrorCategory
from models import AnalysisResponse, ClassifiedError
from pipeline import analyze_page, run_analysis

NO_ALT_HTML = (
    "<html><head><title>T</title><meta name='description' content='d'></head>"
    "<body><h1>H</h1><img src='a.jpg' alt='a'><img src='b.jpg'></body></html>"
)


def serve(html: str):
    return lambda url: html


def failing(category: ErrorCategory, status: int | None = None):
    def fetch(url: str) -> str:
        raise AnalysisError(category, "fetch failed", status=status)

    return fetch


def test_perfect_https_page(sample_html):
    result = run_analysis({"url": "https://example.com"}, fetch=serve(sample_html))
    assert isinstance(result, AnalysisResponse)
    assert result.url == "https://example.com"
    assert result.seo_score == 100
    assert result.issues == ()


def test_same_page_over_http_loses_https_points(sample_html):
    result = run_analysis({"url": "http://example.com"}, fetch=serve(sample_html))
    assert result.seo_score == 80
    assert result.issues == ("Page does not use HTTPS",)


def test_missing_alt_issue_text():
    result = run_analysis({"url": "https://example.com"}, fetch=serve(NO_ALT_HTML))
    assert result.issues == ("1 image(s) missing alt text",)


def test_checks_are_passed_then_issues():
    result = run_analysis({"url": "http://example.com"}, fetch=serve(NO_ALT_HTML))
    assert result.checks == result.passed_checks + result.issues
    assert len(result.checks) == 5


def test_pipeline_is_idempotent(sample_html):
    first = analyze_page({"url": "https://example.com"}, fetch=serve(sample_html))
    second = analyze_page({"url": "https://example.com"}, fetch=serve(sample_html))
    assert first == second


def test_fetch_receives_validated_url(sample_html):
    seen = []

    def fetch(url):
        seen.append(url)
        return sample_html

    run_analysis({"url": "https://example.com/page?q=1"}, fetch=fetch)
    assert seen == ["https://example.com/page?q=1"]


@pytest.mark.parametrize("body", [{}, {"url": 12345}, {"url": "not a url"}, {"url": "ftp://example.com"}])
def test_invalid_requests_never_fetch(body):
    def fetch(url):
        raise AssertionError("fetch should not be called")

    result = run_analysis(body, fetch=fetch)
    assert isinstance(result, ClassifiedError)
    assert result.status_code == 400
    assert result.category == "Invalid Request"


@pytest.mark.parametrize(
    "category,status,expected_status",
    [
        (ErrorCategory.EMPTY_CONTENT, None, 422),
        (ErrorCategory.TIMEOUT, None, 408),
        (ErrorCategory.CONTENT_TOO_LARGE, None, 413),
        (ErrorCategory.DNS_FAILURE, None, 502),
        (ErrorCategory.CONNECTION_REFUSED, None, 403),
        (ErrorCategory.TARGET_SERVER_ERROR, 500, 502),
        (ErrorCategory.TARGET_CLIENT_ERROR, 404, 400),
        (ErrorCategory.UNKNOWN_FETCH_ERROR, None, 500),
    ],
)
def test_fetch_failures_are_classified(category, status, expected_status):
    result = run_analysis({"url": "https://example.com"}, fetch=failing(category, status))
    assert isinstance(result, ClassifiedError)
    assert result.status_code == expected_status


def test_unexpected_exception_becomes_internal_error():
    def fetch(url):
        raise RuntimeError("kaboom")

    result = run_analysis({"url": "https://example.com"}, fetch=fetch)
    assert result == ClassifiedError(500, "Internal Server Error", "An unexpected error occurred during analysis")


def test_analyze_page_propagates_errors():
    with pytest.raises(AnalysisError) as excinfo:
        analyze_page({"url": "https://example.com"}, fetch=failing(ErrorCategory.EMPTY_CONTENT))
    assert excinfo.value.category is ErrorCategory.EMPTY_CONTENT
