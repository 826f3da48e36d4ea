"""
Unsubscribe candidate extraction from a single email.

Three independent sources are read, in decreasing order of trust:
- the List-Unsubscribe header (RFC 2369), plus List-Unsubscribe-Post (RFC 8058)
- anchors in the HTML body
- bare URLs in the plain text body

A source that is absent or cannot be parsed contributes no candidates;
extraction itself never raises.
"""

import urllib.parse
from typing import List, Optional
from bs4 import BeautifulSoup

from .constants import (
    UNSUBSCRIBE_KEYWORDS, HEADER_ENTRY_PATTERN, TEXT_UNSUBSCRIBE_URL_PATTERN,
    TRAILING_URL_PUNCTUATION, ALLOWED_SCHEMES,
    SOURCE_HEADER, SOURCE_HTML, SOURCE_TEXT,
    METHOD_GET, METHOD_POST, METHOD_BROWSER
)
from .exceptions import ExtractionError
from .logging import UnsubscribeLogger
from .types import Email, UnsubscribeCandidate


class UnsubscribeLinkExtractor:
    """Extract unsubscribe candidates from headers and body content."""

    def __init__(self):
        self.unsubscribe_keywords = UNSUBSCRIBE_KEYWORDS
        self.logger = UnsubscribeLogger("link_extractor")

    def extract(self, email: Email) -> List[UnsubscribeCandidate]:
        """Return all candidates of an email in header, html, text order."""
        candidates = []
        sources = (
            (SOURCE_HEADER, lambda: self.extract_from_header(
                email.list_unsubscribe, email.list_unsubscribe_post)),
            (SOURCE_HTML, lambda: self.extract_from_html(email.html_body)),
            (SOURCE_TEXT, lambda: self.extract_from_text(email.body)),
        )

        for source, extract_source in sources:
            try:
                candidates.extend(extract_source())
            except ExtractionError as e:
                self.logger.warning("Ignoring unparseable source", {
                    'email_id': email.id,
                    'source': source,
                    'error': str(e)
                })

        self.logger.debug("Extracted unsubscribe candidates", {
            'email_id': email.id,
            'count': len(candidates)
        })
        return candidates

    def extract_from_header(self, list_unsubscribe: Optional[str],
                            has_post: bool = False) -> List[UnsubscribeCandidate]:
        """Parse a List-Unsubscribe value into http_get/http_post candidates.

        Only angle-bracketed http(s) entries are kept, so mailto entries
        are dropped here. When the one-click flag is set a single POST
        candidate is added for the first kept URL.
        """
        if not list_unsubscribe:
            return []
        if not isinstance(list_unsubscribe, str):
            raise ExtractionError("List-Unsubscribe header is not text",
                                  {'type': type(list_unsubscribe).__name__})

        urls = []
        for entry in list_unsubscribe.split(','):
            match = HEADER_ENTRY_PATTERN.match(entry.strip())
            if not match:
                continue
            url = match.group(1).strip()
            if self._has_http_scheme(url):
                urls.append(url)

        candidates = [
            UnsubscribeCandidate(source=SOURCE_HEADER, url=url, method=METHOD_GET)
            for url in urls
        ]
        if has_post and urls:
            candidates.append(
                UnsubscribeCandidate(source=SOURCE_HEADER, url=urls[0], method=METHOD_POST)
            )
        return candidates

    def extract_from_html(self, html_content: Optional[str]) -> List[UnsubscribeCandidate]:
        """Collect anchors whose text or href carries unsubscribe vocabulary."""
        if not html_content:
            return []

        try:
            soup = BeautifulSoup(html_content, 'html.parser')
            anchors = soup.find_all('a', href=True)
        except Exception as e:
            raise ExtractionError(f"Failed to parse HTML body: {e}")

        candidates = []
        for anchor in anchors:
            href = anchor['href'].strip()
            if not href:
                continue
            text = ' '.join(anchor.get_text(separator=' ').split())
            if self._mentions_unsubscribe(text) or self._mentions_unsubscribe(href):
                candidates.append(UnsubscribeCandidate(
                    source=SOURCE_HTML,
                    url=href,
                    method=METHOD_BROWSER,
                    text=text
                ))
        return candidates

    def extract_from_text(self, text_content: Optional[str]) -> List[UnsubscribeCandidate]:
        """Find absolute unsubscribe/opt-out/preferences URLs in plain text."""
        if not text_content:
            return []
        if not isinstance(text_content, str):
            raise ExtractionError("Plain text body is not text",
                                  {'type': type(text_content).__name__})

        candidates = []
        for match in TEXT_UNSUBSCRIBE_URL_PATTERN.finditer(text_content):
            url = match.group(0).rstrip(TRAILING_URL_PUNCTUATION)
            candidates.append(UnsubscribeCandidate(
                source=SOURCE_TEXT, url=url, method=METHOD_BROWSER
            ))
        return candidates

    def _mentions_unsubscribe(self, value: str) -> bool:
        value_lower = value.lower()
        return any(keyword in value_lower for keyword in self.unsubscribe_keywords)

    @staticmethod
    def _has_http_scheme(url: str) -> bool:
        try:
            return urllib.parse.urlsplit(url).scheme.lower() in ALLOWED_SCHEMES
        except ValueError:
            return False
