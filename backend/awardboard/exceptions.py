"""
AwardBoard Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-safe message and an optional context
       dict that is logged but never returned to the client.
Who:   Raised by services and dependencies; caught either by route handlers
       (which turn them into award codes) or by the global handlers
       registered in main.py.

Exception Hierarchy:
    AwardBoardError (base)
    ├── AuthenticationError         → 401 JSON {status: message}
    │   ├── UnknownUserError        (no such username)
    │   └── BadCredentialError      (password mismatch)
    ├── SessionExpiredError         → session cookie cleared, request is anonymous
    ├── NotAuthenticatedError       → 302 redirect to the login page
    ├── AlreadyAuthenticatedError   → 302 redirect to /home
    ├── NotFoundError               → award left unset (fallback 404)
    ├── ForbiddenError              → award 403
    ├── UnprocessableContentError   → award 422
    └── DatabaseError               → 500
"""

from typing import Any, Dict, Optional


class AwardBoardError(Exception):
    """
    Base exception for all AwardBoard application errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
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


class AuthenticationError(AwardBoardError):
    """A username/password pair did not authenticate."""

    def __init__(
        self,
        message: str = "Incorrect username or password",
        username: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if username is not None:
            ctx["username"] = username
        super().__init__(message=message, context=ctx)
        self.username = username


class UnknownUserError(AuthenticationError):
    """No user record exists for the submitted username."""

    def __init__(self, username: Optional[str] = None):
        super().__init__(message="Incorrect username or password!", username=username)


class BadCredentialError(AuthenticationError):
    """The user exists but the password hash comparison failed."""

    def __init__(self, username: Optional[str] = None):
        super().__init__(message="Incorrect username or password", username=username)


class SessionExpiredError(AwardBoardError):
    """
    Raised when a session token cannot be restored.

    When:    Unknown token, idle timeout elapsed, or the user behind the
             session no longer exists.
    Effect:  The request continues anonymously and the cookie is cleared.
    """

    def __init__(self, message: str = "Session expired", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotAuthenticatedError(AwardBoardError):
    """A protected route was requested without a session."""

    def __init__(self, path: Optional[str] = None):
        ctx = {"path": path} if path else {}
        super().__init__(message="Login required", context=ctx)


class AlreadyAuthenticatedError(AwardBoardError):
    """An anonymous-only route (login page, signup) was requested with a session."""

    def __init__(self, username: Optional[str] = None):
        ctx = {"username": username} if username else {}
        super().__init__(message="Already logged in", context=ctx)


class NotFoundError(AwardBoardError):
    """
    Raised when a requested resource does not exist.

    The service layer converts SQLAlchemy's None result into this exception
    so handlers can decide what the miss means for the award code.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ForbiddenError(AwardBoardError):
    """The requester is authenticated but does not own the resource."""

    def __init__(
        self,
        message: str = "You can only remove your own comments",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnprocessableContentError(AwardBoardError):
    """
    Raised when content is well-formed but violates the board's content policy.

    When:    A comment contains a character beyond Latin-1 (code point > 255).
    """

    def __init__(
        self,
        message: str = "Comments may only contain Latin-1 characters",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AwardBoardError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original
    error type travels in `context` for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
