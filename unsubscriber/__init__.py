"""
Inbox Unsubscriber - resolve and execute unsubscribe actions found in
marketing email.
"""

__version__ = '0.1.0'
