"""Error types raised by the authentication service."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for failures reported back to the caller."""

    status_code = 500


class NotFound(AuthError):
    """Unknown user, or an unknown or already consumed authentication session."""

    status_code = 404


class InvalidProof(AuthError):
    """The submitted response does not satisfy the verification equations."""

    status_code = 401


class MalformedInput(AuthError):
    """A wire value could not be decoded or lies outside the group."""

    status_code = 400


__all__ = ["AuthError", "InvalidProof", "MalformedInput", "NotFound"]
