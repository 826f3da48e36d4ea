"""
Constants and shared patterns for unsubscribe resolution.

Keyword vocabularies, the default shortener deny-list and the pre-compiled
patterns used by the extractor and validator live here.
"""

import re
from typing import List, Pattern, Tuple

# Candidate sources, in decreasing order of trust
SOURCE_HEADER = "header"
SOURCE_HTML = "html"
SOURCE_TEXT = "text"

# Candidate methods
METHOD_GET = "http_get"
METHOD_POST = "http_post"
METHOD_BROWSER = "browser_link"

# Vocabulary matched against anchor text and href
UNSUBSCRIBE_KEYWORDS: List[str] = [
    'unsubscribe', 'opt-out', 'opt out', 'optout', 'preferences'
]

# URL shorteners and redirectors that hide the real destination
URL_SHORTENERS: Tuple[str, ...] = (
    'bit.ly', 'tinyurl.com', 'goo.gl', 't.co', 'ow.ly',
    's.id', 'j.mp', 'buff.ly', 'dlvr.it', 'is.gd', 'rebrand.ly', 'cutt.ly'
)

ALLOWED_SCHEMES: Tuple[str, ...] = ('http', 'https')

# Angle-bracketed entry of a List-Unsubscribe header
HEADER_ENTRY_PATTERN: Pattern = re.compile(r'^<\s*([^>]+?)\s*>$')

# Absolute http(s) URL carrying unsubscribe vocabulary, for plain text bodies
TEXT_UNSUBSCRIBE_URL_PATTERN: Pattern = re.compile(
    r'https?://[^\s<>"\']*?(?:unsubscribe|opt-?out|preferences)[^\s<>"\']*',
    re.IGNORECASE
)

# Domain of a From value such as "Shop <news@shop.example>"
SENDER_DOMAIN_PATTERN: Pattern = re.compile(r'@([^\s>]+)')

# Sentence punctuation that commonly trails a URL in prose
TRAILING_URL_PUNCTUATION = '.,;:!?)]}\''

# Outcome failure reasons
REASON_NO_CANDIDATES = "no valid unsubscribe mechanism found"
REASON_ALL_FAILED = "all unsubscribe attempts failed"
REASON_BLOCKED = "blocked by safety gate"
REASON_NOT_REQUESTED = "classifier did not request unsubscribe"

# Validation rejection reasons
REJECT_SCHEME = "unsupported scheme"
REJECT_NO_HOST = "missing host"
REJECT_SHORTENER = "url shortener host"
REJECT_DUPLICATE = "duplicate candidate"
