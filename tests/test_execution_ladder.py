"""
Tests for the execution ladder.
"""

import pytest

from unsubscriber.email_processor.unsubscribe import (
    Email, UnsubscribeCandidate, ValidatedCandidate, ExecutionAttempt
)
from unsubscriber.email_processor.unsubscribe.constants import (
    SOURCE_HEADER, SOURCE_HTML, SOURCE_TEXT, METHOD_GET, METHOD_POST, METHOD_BROWSER,
    REASON_NO_CANDIDATES, REASON_ALL_FAILED
)
from unsubscriber.unsubscribe_executor import ExecutionLadder


class RecordingExecutor:
    """Executor stub with a scripted result per URL."""

    def __init__(self, method_name, results=None, raises=None):
        self.method_name = method_name
        self.results = results or {}
        self.raises = raises
        self.calls = []

    def attempt(self, candidate, email):
        self.calls.append(candidate.url)
        if self.raises:
            raise self.raises
        success = self.results.get(candidate.url, False)
        return ExecutionAttempt(
            candidate=candidate,
            success=success,
            error=None if success else 'HTTP 500'
        )


def validated(url, method, source=SOURCE_HEADER):
    return ValidatedCandidate(UnsubscribeCandidate(source=source, url=url, method=method), url)


@pytest.fixture
def email():
    return Email(id='msg-1', sender='news@shop.example')


class TestExecutionLadder:
    """Ordering, short-circuiting and simulation."""

    def test_no_candidates(self, email):
        ladder = ExecutionLadder([RecordingExecutor(METHOD_GET)])

        outcome = ladder.run([], email, simulate=False)

        assert outcome.success is False
        assert outcome.failure_reason == REASON_NO_CANDIDATES
        assert outcome.attempts == []

    def test_stops_at_first_success(self, email):
        get = RecordingExecutor(METHOD_GET, {'https://a.example/get': False})
        post = RecordingExecutor(METHOD_POST, {'https://a.example/get': False})
        browser = RecordingExecutor(METHOD_BROWSER, {'https://b.example/unsubscribe': True})
        ladder = ExecutionLadder([get, post, browser])
        candidates = [
            validated('https://a.example/get', METHOD_GET),
            validated('https://a.example/get', METHOD_POST),
            validated('https://b.example/unsubscribe', METHOD_BROWSER, SOURCE_HTML),
            validated('https://c.example/optout', METHOD_BROWSER, SOURCE_TEXT),
        ]

        outcome = ladder.run(candidates, email, simulate=False)

        assert outcome.success is True
        assert outcome.method_used == METHOD_BROWSER
        assert len(outcome.attempts) == 3
        assert [a.success for a in outcome.attempts] == [False, False, True]
        assert browser.calls == ['https://b.example/unsubscribe']

    def test_all_failed(self, email):
        get = RecordingExecutor(METHOD_GET)
        ladder = ExecutionLadder([get])
        candidates = [
            validated('https://a.example/1', METHOD_GET),
            validated('https://a.example/2', METHOD_GET),
        ]

        outcome = ladder.run(candidates, email, simulate=False)

        assert outcome.success is False
        assert outcome.method_used is None
        assert outcome.failure_reason == REASON_ALL_FAILED
        assert len(outcome.attempts) == 2
        assert get.calls == ['https://a.example/1', 'https://a.example/2']

    def test_simulate_makes_no_attempts(self, email):
        get = RecordingExecutor(METHOD_GET)
        browser = RecordingExecutor(METHOD_BROWSER)
        ladder = ExecutionLadder([get, browser])
        candidates = [
            validated('https://a.example/1', METHOD_GET),
            validated('https://b.example/unsubscribe', METHOD_BROWSER, SOURCE_HTML),
        ]

        outcome = ladder.run(candidates, email, simulate=True)

        assert outcome.success is True
        assert outcome.simulated is True
        assert outcome.attempts == []
        assert outcome.candidates == candidates
        assert get.calls == []
        assert browser.calls == []

    def test_missing_executor_is_a_failed_attempt(self, email):
        browser = RecordingExecutor(METHOD_BROWSER, {'https://b.example/unsubscribe': True})
        ladder = ExecutionLadder([browser])
        candidates = [
            validated('https://a.example/1', METHOD_GET),
            validated('https://b.example/unsubscribe', METHOD_BROWSER, SOURCE_HTML),
        ]

        outcome = ladder.run(candidates, email, simulate=False)

        assert outcome.success is True
        assert outcome.attempts[0].success is False
        assert 'No executor registered' in outcome.attempts[0].error

    def test_raising_executor_does_not_stop_the_ladder(self, email):
        broken = RecordingExecutor(METHOD_GET, raises=RuntimeError('boom'))
        browser = RecordingExecutor(METHOD_BROWSER, {'https://b.example/unsubscribe': True})
        ladder = ExecutionLadder([broken, browser])
        candidates = [
            validated('https://a.example/1', METHOD_GET),
            validated('https://b.example/unsubscribe', METHOD_BROWSER, SOURCE_HTML),
        ]

        outcome = ladder.run(candidates, email, simulate=False)

        assert outcome.success is True
        assert outcome.attempts[0].error == 'Unexpected error: boom'
