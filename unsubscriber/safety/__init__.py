"""
Safety checks run before any unsubscribe activity.
"""

from .gate import SafetyGate
from .whitelist import Whitelist, WhitelistStore

__all__ = ['SafetyGate', 'Whitelist', 'WhitelistStore']
