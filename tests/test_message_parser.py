"""
Tests for building Email records from RFC 822 messages and Gmail payloads.
"""

import base64

from unsubscriber.email_processor.message_parser import parse_rfc822, parse_gmail_message


MULTIPART_MESSAGE = b"""\
From: =?utf-8?q?Caf=C3=A9_Shop?= <news@shop.example>
To: me@example.com
Subject: Weekly deals
Message-ID: <abc123@shop.example>
Date: Mon, 5 Oct 2026 10:00:00 +0000
List-Unsubscribe: <https://shop.example/u?id=1>,
 <mailto:unsubscribe@shop.example>
List-Unsubscribe-Post: List-Unsubscribe=One-Click
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="outer"

--outer
Content-Type: multipart/alternative; boundary="inner"

--inner
Content-Type: text/plain; charset="utf-8"

Great deals this week.
Unsubscribe: https://shop.example/unsubscribe

--inner
Content-Type: text/html; charset="utf-8"

<p>Great deals</p><a href="https://shop.example/unsubscribe">Unsubscribe</a>
--inner--

--outer
Content-Type: text/plain; name="terms.txt"
Content-Disposition: attachment; filename="terms.txt"

attachment text must not be read
--outer--
"""


def b64(text):
    return base64.urlsafe_b64encode(text.encode('utf-8')).decode('ascii').rstrip('=')


class TestParseRfc822:
    """Raw message parsing."""

    def test_headers(self):
        email = parse_rfc822(MULTIPART_MESSAGE)

        assert email.id == '<abc123@shop.example>'
        assert email.sender == 'Café Shop <news@shop.example>'
        assert email.recipient == 'me@example.com'
        assert email.subject == 'Weekly deals'
        assert email.list_unsubscribe == '<https://shop.example/u?id=1>, <mailto:unsubscribe@shop.example>'
        assert email.list_unsubscribe_post is True

    def test_nested_parts_are_collected(self):
        email = parse_rfc822(MULTIPART_MESSAGE)

        assert 'Great deals this week.' in email.body
        assert 'https://shop.example/unsubscribe' in email.body
        assert '<a href="https://shop.example/unsubscribe">' in email.html_body
        assert 'attachment text' not in email.body
        assert email.snippet.startswith('Great deals this week. Unsubscribe:')

    def test_single_part_message_and_fallback_id(self):
        raw = "From: a@b.example\nSubject: Hi\n\nJust text\n"

        email = parse_rfc822(raw, fallback_id='hi.eml')

        assert email.id == 'hi.eml'
        assert email.body.strip() == 'Just text'
        assert email.html_body == ''
        assert email.list_unsubscribe is None
        assert email.list_unsubscribe_post is False


class TestParseGmailMessage:
    """Gmail API resource parsing."""

    def test_nested_payload(self):
        message = {
            'id': 'g-1',
            'threadId': 't-1',
            'snippet': 'Great deals',
            'payload': {
                'mimeType': 'multipart/mixed',
                'headers': [
                    {'name': 'From', 'value': 'news@shop.example'},
                    {'name': 'Subject', 'value': 'Deals'},
                    {'name': 'LIST-UNSUBSCRIBE', 'value': '<https://shop.example/u>'},
                    {'name': 'List-Unsubscribe-Post', 'value': 'List-Unsubscribe=One-Click'},
                ],
                'parts': [
                    {
                        'mimeType': 'multipart/alternative',
                        'parts': [
                            {'mimeType': 'text/plain', 'body': {'data': b64('plain body')}},
                            {'mimeType': 'text/html', 'body': {'data': b64('<b>html body</b>')}},
                        ]
                    }
                ]
            }
        }

        email = parse_gmail_message(message)

        assert email.id == 'g-1'
        assert email.thread_id == 't-1'
        assert email.sender == 'news@shop.example'
        assert email.body == 'plain body'
        assert email.html_body == '<b>html body</b>'
        assert email.list_unsubscribe == '<https://shop.example/u>'
        assert email.list_unsubscribe_post is True

    def test_single_part_body(self):
        message = {
            'id': 'g-2',
            'payload': {'mimeType': 'text/plain', 'body': {'data': b64('hello')}, 'headers': []}
        }

        email = parse_gmail_message(message)

        assert email.body == 'hello'
        assert email.list_unsubscribe is None

    def test_missing_payload(self):
        email = parse_gmail_message({'id': 'g-3'})

        assert email.id == 'g-3'
        assert email.body == ''
