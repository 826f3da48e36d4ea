"""
Build Email records from raw RFC 822 messages and Gmail API payloads.

Both formats are multipart trees: a node is either a leaf part with a body
or a container with child parts. The walkers below visit the tree
explicitly and collect text/plain and text/html leaves into separate
buffers.
"""

import base64
import binascii
import email
from email.header import decode_header, make_header
from email.message import Message
from typing import Any, Dict, List, Optional, Union

from .unsubscribe.types import Email

TEXT_PLAIN = 'text/plain'
TEXT_HTML = 'text/html'
SNIPPET_LENGTH = 200


def _decode_header_value(value: Optional[str]) -> str:
    """Decode RFC 2047 encoded words, keeping the raw value if that fails."""
    if not value:
        return ''
    try:
        return str(make_header(decode_header(value)))
    except (UnicodeDecodeError, LookupError, ValueError):
        return str(value)


def _decode_bytes(payload: bytes, charset: Optional[str]) -> str:
    try:
        return payload.decode(charset or 'utf-8', errors='ignore')
    except LookupError:
        return payload.decode('utf-8', errors='ignore')


def _make_snippet(text: str) -> str:
    return ' '.join(text.split())[:SNIPPET_LENGTH]


def _walk_mime(part: Message, buffers: Dict[str, List[str]]):
    if part.is_multipart():
        for child in part.get_payload():
            _walk_mime(child, buffers)
        return

    content_type = part.get_content_type()
    if content_type not in buffers or part.get_content_disposition() == 'attachment':
        return

    payload = part.get_payload(decode=True)
    if payload:
        buffers[content_type].append(_decode_bytes(payload, part.get_content_charset()))


def parse_rfc822(raw: Union[bytes, str], fallback_id: str = '') -> Email:
    """Parse a complete RFC 822 message (e.g. an .eml file)."""
    if isinstance(raw, bytes):
        message = email.message_from_bytes(raw)
    else:
        message = email.message_from_string(raw)

    buffers: Dict[str, List[str]] = {TEXT_PLAIN: [], TEXT_HTML: []}
    _walk_mime(message, buffers)
    body = ''.join(buffers[TEXT_PLAIN])

    list_unsubscribe = message.get('List-Unsubscribe')
    return Email(
        id=(message.get('Message-ID') or fallback_id).strip(),
        thread_id=message.get('Thread-Index') or message.get('In-Reply-To'),
        subject=_decode_header_value(message.get('Subject')),
        sender=_decode_header_value(message.get('From')),
        recipient=_decode_header_value(message.get('To')),
        date=message.get('Date'),
        body=body,
        html_body=''.join(buffers[TEXT_HTML]),
        snippet=_make_snippet(body),
        list_unsubscribe=' '.join(str(list_unsubscribe).split()) if list_unsubscribe else None,
        list_unsubscribe_post=bool(message.get('List-Unsubscribe-Post'))
    )


def _decode_base64url(data: str) -> bytes:
    padded = data + '=' * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return b''


def _walk_gmail_part(part: Dict[str, Any], buffers: Dict[str, List[str]]):
    data = (part.get('body') or {}).get('data')
    mime_type = (part.get('mimeType') or '').lower()
    if data and mime_type in buffers:
        buffers[mime_type].append(_decode_bytes(_decode_base64url(data), 'utf-8'))

    for child in part.get('parts') or []:
        _walk_gmail_part(child, buffers)


def parse_gmail_message(message: Dict[str, Any]) -> Email:
    """Parse a Gmail API ``users.messages.get(format='full')`` resource."""
    payload = message.get('payload') or {}
    headers = {
        header.get('name', '').lower(): header.get('value')
        for header in payload.get('headers') or []
    }

    buffers: Dict[str, List[str]] = {TEXT_PLAIN: [], TEXT_HTML: []}
    _walk_gmail_part(payload, buffers)

    return Email(
        id=message.get('id', ''),
        thread_id=message.get('threadId'),
        subject=headers.get('subject') or '',
        sender=headers.get('from') or '',
        recipient=headers.get('to') or '',
        date=headers.get('date'),
        body=''.join(buffers[TEXT_PLAIN]),
        html_body=''.join(buffers[TEXT_HTML]),
        snippet=message.get('snippet', ''),
        list_unsubscribe=headers.get('list-unsubscribe'),
        list_unsubscribe_post=bool(headers.get('list-unsubscribe-post'))
    )
