"""
Click commands for the inbox unsubscriber.
"""
