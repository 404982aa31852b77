"""Failure categories and their mapping to public HTTP errors.

Every stage raises AnalysisError with an explicit category at the point of
failure. classify_error() is the only place a category becomes a status code,
label and message.
"""

from enum import Enum

from models import ClassifiedError


class ErrorCategory(str, Enum):
    MISSING_FIELD = "MissingField"
    INVALID_TYPE = "InvalidType"
    INVALID_FORMAT = "InvalidFormat"
    INVALID_PROTOCOL = "InvalidProtocol"
    TIMEOUT = "Timeout"
    DNS_FAILURE = "DnsFailure"
    CONNECTION_REFUSED = "ConnectionRefused"
    TLS_ERROR = "TlsError"
    TARGET_CLIENT_ERROR = "TargetClientError"
    TARGET_SERVER_ERROR = "TargetServerError"
    UNSUPPORTED_CONTENT_TYPE = "UnsupportedContentType"
    EMPTY_CONTENT = "EmptyContent"
    CONTENT_TOO_LARGE = "ContentTooLarge"
    TOO_MANY_REDIRECTS = "TooManyRedirects"
    UNKNOWN_FETCH_ERROR = "UnknownFetchError"


class AnalysisError(Exception):
    """A failure in the analysis pipeline with a known category."""

    def __init__(self, category: ErrorCategory, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.category = category
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f"AnalysisError({self.category.value!r}, {self.message!r}, status={self.status!r})"


# category -> (status code, public label, message); None message means "use the error's own".
CLASSIFICATION_TABLE: dict[ErrorCategory, tuple[int, str, str | None]] = {
    ErrorCategory.MISSING_FIELD: (400, "Invalid Request", None),
    ErrorCategory.INVALID_TYPE: (400, "Invalid Request", None),
    ErrorCategory.INVALID_FORMAT: (400, "Invalid Request", None),
    ErrorCategory.INVALID_PROTOCOL: (400, "Invalid Request", None),
    ErrorCategory.TIMEOUT: (408, "Request Timeout", "The request timed out while fetching the URL"),
    ErrorCategory.CONNECTION_REFUSED: (
        403,
        "Access Forbidden",
        "The website is blocking access or refusing connections",
    ),
    ErrorCategory.EMPTY_CONTENT: (422, "Unprocessable Content", "The page returned empty or no HTML content"),
    ErrorCategory.CONTENT_TOO_LARGE: (
        413,
        "Payload Too Large",
        "The page content exceeds the maximum allowed size",
    ),
    ErrorCategory.DNS_FAILURE: (502, "Bad Gateway", "Unable to resolve the domain name"),
    ErrorCategory.TARGET_SERVER_ERROR: (502, "Bad Gateway", "Target server returned error: {status}"),
    ErrorCategory.TARGET_CLIENT_ERROR: (400, "Bad Request", "Target server returned error: {status}"),
}

UNCLASSIFIED_ERROR = ClassifiedError(
    status_code=500,
    category="Internal Server Error",
    message="An unexpected error occurred during analysis",
)


def classify_error(exc: BaseException) -> ClassifiedError:
    """Map any exception raised during analysis to its public error."""
    if not isinstance(exc, AnalysisError):
        return UNCLASSIFIED_ERROR

    entry = CLASSIFICATION_TABLE.get(exc.category)
    if entry is None:
        return UNCLASSIFIED_ERROR

    status_code, label, template = entry
    if template is None:
        message = exc.message
    else:
        message = template.format(status=exc.status if exc.status is not None else "unknown")
    return ClassifiedError(status_code=status_code, category=label, message=message)
