"""
Tests for unsubscribe candidate extraction.

Covers the three candidate sources (List-Unsubscribe header, HTML anchors,
plain text URLs), their ordering, and recovery from malformed input.
"""

import pytest

from unsubscriber.email_processor.unsubscribe import UnsubscribeLinkExtractor, Email
from unsubscriber.email_processor.unsubscribe.constants import (
    SOURCE_HEADER, SOURCE_HTML, SOURCE_TEXT, METHOD_GET, METHOD_POST, METHOD_BROWSER
)


@pytest.fixture
def extractor():
    return UnsubscribeLinkExtractor()


def make_email(**kwargs):
    defaults = {'id': 'msg-1', 'sender': 'news@shop.example', 'recipient': 'me@example.com'}
    defaults.update(kwargs)
    return Email(**defaults)


class TestHeaderExtraction:
    """List-Unsubscribe and List-Unsubscribe-Post handling."""

    def test_mailto_entry_is_excluded(self, extractor):
        """An http entry next to a mailto entry yields exactly one GET candidate."""
        candidates = extractor.extract_from_header("<https://a.example/u>, <mailto:x@y.com>")

        assert len(candidates) == 1
        assert candidates[0].url == "https://a.example/u"
        assert candidates[0].method == METHOD_GET
        assert candidates[0].source == SOURCE_HEADER

    def test_one_click_flag_adds_post_candidate(self, extractor):
        """The List-Unsubscribe-Post flag adds one POST candidate with the same URL."""
        candidates = extractor.extract_from_header("<https://a.example/u>", has_post=True)

        assert [c.method for c in candidates] == [METHOD_GET, METHOD_POST]
        assert candidates[1].url == candidates[0].url

    def test_one_click_flag_with_multiple_urls_adds_single_post(self, extractor):
        candidates = extractor.extract_from_header(
            "<https://a.example/u1>, <https://a.example/u2>", has_post=True
        )

        posts = [c for c in candidates if c.method == METHOD_POST]
        assert len(posts) == 1
        assert posts[0].url == "https://a.example/u1"

    def test_one_click_flag_without_http_url_adds_nothing(self, extractor):
        assert extractor.extract_from_header("<mailto:x@y.com>", has_post=True) == []

    def test_entries_without_angle_brackets_are_ignored(self, extractor):
        candidates = extractor.extract_from_header("https://a.example/u, <https://b.example/u>")

        assert [c.url for c in candidates] == ["https://b.example/u"]

    def test_missing_header_yields_nothing(self, extractor):
        assert extractor.extract_from_header(None) == []
        assert extractor.extract_from_header("") == []


class TestHtmlExtraction:
    """Anchor scanning in HTML bodies."""

    def test_anchor_text_match(self, extractor):
        html = '<p><a href="https://shop.example/x?id=1">  Click to\n Unsubscribe </a></p>'

        candidates = extractor.extract_from_html(html)

        assert len(candidates) == 1
        assert candidates[0].method == METHOD_BROWSER
        assert candidates[0].source == SOURCE_HTML
        assert candidates[0].text == "Click to Unsubscribe"

    def test_href_match(self, extractor):
        html = '<a href="https://shop.example/optout?u=1">here</a>'

        candidates = extractor.extract_from_html(html)

        assert [c.url for c in candidates] == ["https://shop.example/optout?u=1"]

    def test_preferences_and_opt_out_vocabulary(self, extractor):
        html = """
        <a href="https://shop.example/p">Email Preferences</a>
        <a href="https://shop.example/o">Opt out</a>
        <a href="https://shop.example/article">Read more</a>
        """

        candidates = extractor.extract_from_html(html)

        assert [c.url for c in candidates] == ["https://shop.example/p", "https://shop.example/o"]

    def test_anchor_without_href_is_ignored(self, extractor):
        assert extractor.extract_from_html('<a name="unsubscribe">Unsubscribe</a>') == []

    def test_unrelated_links_are_ignored(self, extractor):
        html = '<a href="https://example.com/article">interesting article</a>'
        assert extractor.extract_from_html(html) == []


class TestTextExtraction:
    """URL scanning in plain text bodies."""

    def test_finds_unsubscribe_urls(self, extractor):
        text = """
        To unsubscribe from future emails, visit:
        https://company.example/unsubscribe?id=12345.

        Manage your preferences: https://company.example/preferences
        Read our blog: https://company.example/blog
        """

        candidates = extractor.extract_from_text(text)

        assert [c.url for c in candidates] == [
            "https://company.example/unsubscribe?id=12345",
            "https://company.example/preferences",
        ]
        assert all(c.source == SOURCE_TEXT and c.method == METHOD_BROWSER for c in candidates)

    def test_keyword_match_is_case_insensitive(self, extractor):
        candidates = extractor.extract_from_text("Stop: https://x.example/OptOut/123")
        assert [c.url for c in candidates] == ["https://x.example/OptOut/123"]

    def test_ignores_non_http_urls(self, extractor):
        assert extractor.extract_from_text("ftp://x.example/unsubscribe") == []


class TestFullExtraction:
    """Whole-email extraction."""

    def test_email_without_signals_yields_nothing(self, extractor):
        email = make_email(
            subject='Lunch?',
            body='Hey! Check out https://example.com/article',
            html_body='<p>See <a href="https://example.com/article">this</a></p>'
        )

        assert extractor.extract(email) == []

    def test_candidates_are_ordered_header_html_text(self, extractor):
        email = make_email(
            list_unsubscribe='<https://h.example/unsub>',
            list_unsubscribe_post=True,
            html_body='<a href="https://w.example/unsubscribe">Unsubscribe</a>',
            body='Opt out: https://t.example/optout'
        )

        candidates = extractor.extract(email)

        assert [c.source for c in candidates] == [
            SOURCE_HEADER, SOURCE_HEADER, SOURCE_HTML, SOURCE_TEXT
        ]
        assert [c.method for c in candidates] == [
            METHOD_GET, METHOD_POST, METHOD_BROWSER, METHOD_BROWSER
        ]

    def test_malformed_source_is_recovered(self, extractor):
        """A non-text header value does not prevent the body from being read."""
        email = make_email(
            list_unsubscribe=12345,
            body='https://t.example/unsubscribe'
        )

        candidates = extractor.extract(email)

        assert [c.url for c in candidates] == ["https://t.example/unsubscribe"]
