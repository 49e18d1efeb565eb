"""
Blog API — Exception Hierarchy
===============================

What:  Application exceptions for failures that are NOT expected request outcomes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return a generic 500 JSON body; the context is logged, never returned.
Who:   Raised by services and startup code; caught by global handlers.

Expected outcomes (validation failure, bad token, missing row, duplicate
email) are not exceptions: they travel as `Result` failures, see
blogapi/results.py. What remains here is the "something is broken" family.

Exception Hierarchy:
    BlogError (base)
    ├── ConfigurationError   → fatal at startup (missing signing secret, ...)
    ├── DatabaseError        → 500 Internal Server Error
    └── PasswordHashError    → 500 Internal Server Error (malformed stored hash)
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  Description safe to log; handlers still return a generic text
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(BlogError):
    """
    Raised when the process is started without a required setting.

    When:    TokenService built with an empty secret; settings validation at startup.
    Effect:  Startup aborts. A server that cannot sign tokens must not run.
    """

    def __init__(
        self,
        message: str = "Application is misconfigured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, unexpected constraint violation, deadlock.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The SQL error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PasswordHashError(BlogError):
    """
    Raised when a stored password hash cannot be parsed by bcrypt.

    A well-formed hash never triggers this; a malformed one means the
    credential store was written by something other than PasswordService.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Stored password hash is malformed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
