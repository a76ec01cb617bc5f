"""Core signal and portfolio logic.

This package contains pure business logic with no I/O dependencies
(no network, Redis, or file access). Market data reaches it through
injected async fetch callbacks supplied by the service layer (app/).
"""
