"""Chaum-Pedersen zero-knowledge authentication package."""

from .auth import AuthService, authenticate
from .config import Settings
from .constants import GROUPS, GroupParameters, get_group
from .crypto import (
    DeterministicRandomSource,
    EphemeralCommitment,
    Prover,
    RandomSource,
    SystemRandomSource,
    commit,
    generate_secret,
    solve,
    verify,
)
from .encoding import bytes_to_int, int_to_bytes
from .exceptions import AuthError, InvalidProof, MalformedInput, NotFound
from .store import AuthSession, SessionStore, UserRecord, UserStore

__all__ = [
    "AuthService",
    "authenticate",
    "Settings",
    "GROUPS",
    "GroupParameters",
    "get_group",
    "DeterministicRandomSource",
    "EphemeralCommitment",
    "Prover",
    "RandomSource",
    "SystemRandomSource",
    "commit",
    "generate_secret",
    "solve",
    "verify",
    "bytes_to_int",
    "int_to_bytes",
    "AuthError",
    "InvalidProof",
    "MalformedInput",
    "NotFound",
    "AuthSession",
    "SessionStore",
    "UserRecord",
    "UserStore",
]
