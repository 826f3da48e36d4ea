"""
Unsubscribe Executor Module

This module handles the actual execution of unsubscribe requests:
HTTP GET, RFC 8058 one-click POST and headless browser automation,
tried in order by the ExecutionLadder.
"""

from .http_executor import HttpGetExecutor
from .http_post_executor import HttpPostExecutor
from .browser_executor import BrowserAutomationExecutor
from .browser_driver import LaunchOptions, PlaywrightDriver, SelectorStrategy, DEFAULT_STRATEGIES
from .ladder import ExecutionLadder

__all__ = [
    'HttpGetExecutor', 'HttpPostExecutor', 'BrowserAutomationExecutor',
    'LaunchOptions', 'PlaywrightDriver', 'SelectorStrategy', 'DEFAULT_STRATEGIES',
    'ExecutionLadder'
]
