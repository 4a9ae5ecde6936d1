"""
Application error taxonomy.

Each class maps to exactly one HTTP status in `main.py`:
- ValidationError, DomainRuleError -> 400
- NotFoundError -> 404
- PersistenceError -> 500
"""

from __future__ import annotations


class AppError(RuntimeError):
    status_code = 500


class ValidationError(AppError):
    """
    Input could not be parsed (malformed identifier, invalid field value).
    """

    status_code = 400


class DomainRuleError(AppError):
    """
    A value object or entity rule was violated.
    """

    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class PersistenceError(AppError):
    """
    The database could not complete the request.
    """

    status_code = 500
