"""HTML extractor: turn a fetched page into the SEO signals the scorer needs.

Pure function of (html, source URL). Malformed markup never raises; missing
elements simply produce empty/zero values.
"""

import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from models import SeoSignals

_RELATIVE_PREFIXES = ("/", "./", "../")
_DESCRIPTION_NAME = re.compile(r"^description$", re.I)


def _extract_title(soup: BeautifulSoup) -> str | None:
    title_tag = soup.find("title")
    if title_tag is None:
        return None
    return title_tag.get_text().strip() or None


def _extract_meta_description(soup: BeautifulSoup) -> str | None:
    meta_tag = soup.find("meta", attrs={"name": _DESCRIPTION_NAME})
    if meta_tag is None:
        return None
    return meta_tag.get("content") or None


def _count_images_missing_alt(images: list) -> int:
    missing = 0
    for img in images:
        alt = img.get("alt")
        if alt is None or alt.strip() == "":
            missing += 1
    return missing


def _is_internal_link(href: str, source_url: str, source_host: str | None) -> bool:
    if href.startswith(_RELATIVE_PREFIXES):
        return True
    try:
        resolved_host = urlparse(urljoin(source_url, href)).hostname
    except ValueError:
        return False
    return resolved_host is not None and resolved_host == source_host


def extract_signals(html: str, source_url: str) -> SeoSignals:
    """Parse `html` fetched from `source_url` into SeoSignals."""
    soup = BeautifulSoup(html, "html.parser")
    source = urlparse(source_url)
    source_host = source.hostname

    images = soup.find_all("img")

    internal_links = 0
    for a in soup.find_all("a", href=True):
        href = a.get("href")
        if href and _is_internal_link(href, source_url, source_host):
            internal_links += 1

    return SeoSignals(
        title=_extract_title(soup),
        meta_description=_extract_meta_description(soup),
        h1_count=len(soup.find_all("h1")),
        total_images=len(images),
        images_missing_alt=_count_images_missing_alt(images),
        total_internal_links=internal_links,
        uses_https=source.scheme == "https",
    )
