"""
Custom exceptions for unsubscribe processing with error context.

None of these escape ``UnsubscribeEngine.process``: extraction errors are
recovered to an empty result and execution errors become failed attempts.
"""

from typing import Dict, Any, Optional


class UnsubscribeError(Exception):
    """Base class for unsubscribe pipeline errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.context:
            context_info = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_message} (context: {context_info})"
        return base_message


class ExtractionError(UnsubscribeError):
    """A mail source could not be parsed for candidates."""


class NetworkFailure(UnsubscribeError):
    """An HTTP unsubscribe request failed before a status code was received."""

    def __init__(self, message: str, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        base_message = Exception.__str__(self)
        details = []
        if self.url:
            details.append(f"url={self.url}")
        if self.status_code is not None:
            details.append(f"status_code={self.status_code}")
        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class AutomationFailure(UnsubscribeError):
    """Browser navigation, timeout or selector failure."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.stage = stage

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.stage:
            return f"{base_message} (stage={self.stage})"
        return base_message


class BrowserLaunchError(AutomationFailure):
    """The headless browser could not be started."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, stage='launch', context=context)
