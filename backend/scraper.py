"""Page fetcher: retrieve raw HTML for a single URL.

Enforces the fixed fetch limits (timeout, redirects, content type, size) and
turns every transport failure into an AnalysisError with a specific category.
Does NOT crawl beyond the requested page and never retries.
"""

import logging
import socket
import threading
import time
from urllib.parse import urljoin, urlparse

import requests
import urllib3
from bs4 import UnicodeDammit
from bs4.dammit import EncodingDetector
from urllib3.exceptions import InsecureRequestWarning, NameResolutionError, ReadTimeoutError

from config import (
    ACCEPTED_CONTENT_TYPES,
    CHUNK_SIZE,
    FETCH_TIMEOUT_MS,
    MAX_CONTENT_BYTES,
    MAX_REDIRECTS,
    USER_AGENT,
    VERIFY_TLS_CERTIFICATES,
)
from errors import AnalysisError, ErrorCategory

logger = logging.getLogger("seo_analyzer.scraper")

if not VERIFY_TLS_CERTIFICATES:
    urllib3.disable_warnings(InsecureRequestWarning)

REDIRECT_STATUSES = (301, 302, 303, 307, 308)

_REQUEST_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,text/plain;q=0.9,*/*;q=0.8",
}


def _timeout_error() -> AnalysisError:
    return AnalysisError(ErrorCategory.TIMEOUT, "Request timeout: URL did not respond in time")


def _exception_chain(exc: BaseException):
    """Yield exc and every exception wrapped inside it (cause, context, urllib3 reason)."""
    seen: set[int] = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.append(current.__cause__)
        stack.append(current.__context__)
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            stack.append(reason)
        stack.extend(arg for arg in current.args if isinstance(arg, BaseException))


def _classify_connection_error(exc: requests.exceptions.ConnectionError) -> AnalysisError:
    for inner in _exception_chain(exc):
        if isinstance(inner, (ReadTimeoutError, TimeoutError)):
            return _timeout_error()
        if isinstance(inner, (NameResolutionError, socket.gaierror)):
            return AnalysisError(ErrorCategory.DNS_FAILURE, f"DNS lookup failed: {inner}")
        if isinstance(inner, ConnectionRefusedError):
            return AnalysisError(ErrorCategory.CONNECTION_REFUSED, f"Connection refused: {inner}")
    return AnalysisError(ErrorCategory.UNKNOWN_FETCH_ERROR, f"Failed to fetch URL: {exc}")


def _classify_request_exception(exc: requests.RequestException) -> AnalysisError:
    # Order matters: ConnectTimeout and SSLError are both ConnectionError subclasses.
    if isinstance(exc, requests.exceptions.Timeout):
        return _timeout_error()
    if isinstance(exc, requests.exceptions.SSLError):
        return AnalysisError(ErrorCategory.TLS_ERROR, f"SSL certificate error: {exc}")
    if isinstance(exc, requests.exceptions.ConnectionError):
        return _classify_connection_error(exc)
    return AnalysisError(ErrorCategory.UNKNOWN_FETCH_ERROR, f"Failed to fetch URL: {exc}")


def _check_status(response: requests.Response) -> None:
    status = response.status_code
    if 200 <= status < 300:
        return
    if 400 <= status < 500:
        raise AnalysisError(
            ErrorCategory.TARGET_CLIENT_ERROR,
            f"Client error: Server returned {status} status code",
            status=status,
        )
    if status >= 500:
        raise AnalysisError(
            ErrorCategory.TARGET_SERVER_ERROR,
            f"Server error: Server returned {status} status code",
            status=status,
        )
    raise AnalysisError(
        ErrorCategory.UNKNOWN_FETCH_ERROR,
        f"HTTP error: Server returned {status} status code",
        status=status,
    )


def _check_content_type(response: requests.Response) -> None:
    content_type = (response.headers.get("Content-Type") or "").lower()
    if not any(accepted in content_type for accepted in ACCEPTED_CONTENT_TYPES):
        raise AnalysisError(
            ErrorCategory.UNSUPPORTED_CONTENT_TYPE,
            f"URL does not return HTML content (Content-Type: {content_type or 'missing'})",
        )


class _Watchdog:
    """Shuts down the response socket once the fetch deadline passes.

    A blocked socket read then returns EOF, so a server that drips bytes
    cannot stretch a fetch past its deadline.
    """

    def __init__(self, response: requests.Response, remaining: float) -> None:
        self.fired = False
        self._response = response
        self._timer = threading.Timer(max(remaining, 0.0), self._expire)
        self._timer.daemon = True

    def _expire(self) -> None:
        self.fired = True
        connection = getattr(self._response.raw, "connection", None)
        sock = getattr(connection, "sock", None)
        if sock is None:
            return
        try:
            # Plain socket shutdown, bypassing the TLS layer, wakes the reading thread.
            socket.socket.shutdown(sock, socket.SHUT_RDWR)
        except OSError as exc:
            logger.debug("Socket already closed at deadline: %s", exc)

    def __enter__(self) -> "_Watchdog":
        self._timer.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._timer.cancel()


def _read_limited(response: requests.Response, max_bytes: int, deadline: float) -> bytes:
    """Read the body in chunks, aborting once it exceeds max_bytes or the deadline passes."""
    declared = response.headers.get("Content-Length")
    if declared and declared.strip().isdigit() and int(declared) > max_bytes:
        raise AnalysisError(ErrorCategory.CONTENT_TOO_LARGE, "Page too large: Content exceeds 10MB limit")

    body = bytearray()
    with _Watchdog(response, deadline - time.monotonic()) as watchdog:
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if watchdog.fired or time.monotonic() > deadline:
                    raise _timeout_error()
                if not chunk:
                    continue
                body.extend(chunk)
                if len(body) > max_bytes:
                    raise AnalysisError(
                        ErrorCategory.CONTENT_TOO_LARGE,
                        "Page too large: Content exceeds 10MB limit",
                    )
        except requests.RequestException as exc:
            if watchdog.fired:
                raise _timeout_error() from exc
            raise
        if watchdog.fired:
            raise _timeout_error()
    return bytes(body)


def _decode(response: requests.Response, body: bytes) -> str:
    """Decode with the header charset, else the document's own declaration, else detect."""
    content_type = (response.headers.get("Content-Type") or "").lower()
    encoding = response.encoding if "charset=" in content_type else None
    if not encoding:
        encoding = EncodingDetector.find_declared_encoding(body, is_html=True)
    if encoding:
        try:
            return body.decode(encoding, errors="replace")
        except LookupError:
            logger.debug("Unknown declared encoding %r, detecting instead", encoding)
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        detected = UnicodeDammit(body, is_html=True).unicode_markup
        return detected if detected is not None else body.decode("utf-8", errors="replace")


def _redirect_target(response: requests.Response, current_url: str) -> str | None:
    if response.status_code not in REDIRECT_STATUSES:
        return None
    location = response.headers.get("Location")
    if not location:
        return None
    target = urljoin(current_url, location)
    if urlparse(target).scheme not in ("http", "https"):
        raise AnalysisError(ErrorCategory.UNKNOWN_FETCH_ERROR, f"Redirected to unsupported URL: {target}")
    return target


def _get_following_redirects(
    session: requests.Session,
    url: str,
    deadline: float,
    verify_tls: bool,
) -> requests.Response:
    """GET `url`, following at most MAX_REDIRECTS hops without reading redirect bodies."""
    current_url = url
    redirects = 0
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise _timeout_error()
        response = session.get(
            current_url,
            headers=_REQUEST_HEADERS,
            timeout=remaining,
            allow_redirects=False,
            verify=verify_tls,
            stream=True,
        )
        try:
            target = _redirect_target(response, current_url)
        except AnalysisError:
            response.close()
            raise
        if target is None:
            return response
        response.close()
        redirects += 1
        if redirects > MAX_REDIRECTS:
            raise AnalysisError(
                ErrorCategory.TOO_MANY_REDIRECTS,
                f"Exceeded {MAX_REDIRECTS} redirects while fetching URL",
            )
        logger.debug("Redirect %d: %s -> %s", redirects, current_url, target)
        current_url = target


def fetch_html(
    url: str,
    timeout_ms: int = FETCH_TIMEOUT_MS,
    *,
    verify_tls: bool = VERIFY_TLS_CERTIFICATES,
    session: requests.Session | None = None,
) -> str:
    """
    Fetch `url` with a single GET (plus up to 5 redirects) and return the raw HTML text.
    The whole fetch, redirects and body included, must finish within `timeout_ms`.
    Raises AnalysisError on any failure; never returns partial content.
    """
    deadline = time.monotonic() + timeout_ms / 1000
    own_session = session is None
    if own_session:
        session = requests.Session()

    try:
        try:
            with _get_following_redirects(session, url, deadline, verify_tls) as response:
                _check_status(response)
                _check_content_type(response)
                body = _read_limited(response, MAX_CONTENT_BYTES, deadline)
                html = _decode(response, body)
        except requests.RequestException as exc:
            raise _classify_request_exception(exc) from exc
    except AnalysisError as exc:
        logger.warning("Fetch of %s failed [%s]: %s", url, exc.category.value, exc.message)
        raise
    finally:
        if own_session:
            session.close()

    if not html.strip():
        logger.warning("Fetch of %s returned empty content", url)
        raise AnalysisError(ErrorCategory.EMPTY_CONTENT, "Empty HTML: Page returned no content")

    logger.info("Fetched %s (%d bytes)", url, len(body))
    return html
