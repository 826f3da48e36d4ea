#!/usr/bin/env python3
"""
Command-line entry point for the inbox unsubscriber.

Equivalent to the ``unsubscriber`` console script.
"""

from unsubscriber.cli import cli


if __name__ == '__main__':
    cli(obj={})
