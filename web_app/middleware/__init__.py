"""Middleware for the link ledger web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
