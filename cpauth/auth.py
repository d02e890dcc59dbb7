"""Registration, challenge and verification orchestration."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from .config import Settings
from .constants import AUTH_ID_BYTES, SESSION_TOKEN_BYTES, GroupParameters, get_group
from .crypto import Prover, RandomSource, SystemRandomSource, token_hex, verify
from .encoding import check_range, int_to_hex
from .exceptions import InvalidProof, NotFound
from .store import AuthSession, SessionStore, UserRecord, UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """Stateful verifier for the three-step Chaum-Pedersen login.

    Users register a public commitment ``(y1, y2)`` once. Each login attempt
    sends an ephemeral commitment ``(r1, r2)`` and receives a challenge bound to
    a fresh ``auth_id``; the response ``s`` for that ``auth_id`` is checked
    exactly once, whatever the outcome.

    Re-registering an existing user replaces its commitment without any proof
    of ownership. Callers exposing :meth:`register` must authenticate that
    request themselves if takeover of an identity is a concern.
    """

    def __init__(
        self,
        params: GroupParameters,
        random: Optional[RandomSource] = None,
        *,
        strict: bool = False,
    ) -> None:
        self.params = params
        self.random = random or SystemRandomSource()
        self.strict = strict
        self.users = UserStore()
        self.sessions = SessionStore()

    @classmethod
    def from_settings(
        cls, settings: Settings, random: Optional[RandomSource] = None
    ) -> "AuthService":
        return cls(get_group(settings.group), random, strict=settings.strict)

    def _check_elements(self, **values: int) -> None:
        if not self.strict:
            return
        for field, value in values.items():
            check_range(value, self.params.p, field)

    def register(self, user_id: str, y1: int, y2: int) -> None:
        self._check_elements(y1=y1, y2=y2)
        previous = self.users.put(UserRecord(user_id=user_id, y1=y1, y2=y2))
        if previous is None:
            logger.info("Registered user %r", user_id)
        else:
            logger.info("Replaced public commitment of user %r", user_id)

    def create_challenge(self, user_id: str, r1: int, r2: int) -> Tuple[str, int]:
        if user_id not in self.users:
            logger.warning("Challenge requested for unknown user %r", user_id)
            raise NotFound(f"Unknown user {user_id!r}")
        self._check_elements(r1=r1, r2=r2)

        challenge = self.random.below(self.params.q)
        while True:
            auth_id = token_hex(self.random, AUTH_ID_BYTES)
            try:
                self.sessions.add(
                    AuthSession(auth_id=auth_id, user_id=user_id, r1=r1, r2=r2, c=challenge)
                )
            except KeyError:  # pragma: no cover - 128-bit collision
                continue
            break

        logger.info("Issued challenge %s for user %r", auth_id, user_id)
        return auth_id, challenge

    def verify_authentication(self, auth_id: str, s: int) -> str:
        if self.strict:
            check_range(s, self.params.q, "s")
        try:
            session = self.sessions.pop(auth_id)
        except KeyError:
            logger.warning("Verification for unknown or consumed session %s", auth_id)
            raise NotFound(f"Unknown authentication session {auth_id!r}") from None

        record = self.users.get(session.user_id)
        if record is None:
            logger.warning("User %r vanished before session %s was verified", session.user_id, auth_id)
            raise NotFound(f"Unknown user {session.user_id!r}")

        ok = verify(self.params, session.r1, session.r2, record.y1, record.y2, session.c, s)
        if not ok:
            logger.warning("Rejected proof for user %r (session %s)", session.user_id, auth_id)
            raise InvalidProof("Proof verification failed")

        logger.info("User %r authenticated (session %s)", session.user_id, auth_id)
        return token_hex(self.random, SESSION_TOKEN_BYTES)


def authenticate(service: AuthService, user_id: str, prover: Prover) -> Dict[str, object]:
    """Run one login for ``user_id`` against ``service`` and return the transcript."""

    commitment = prover.commit()
    auth_id, challenge = service.create_challenge(user_id, commitment.r1, commitment.r2)
    response = prover.respond(commitment, challenge)

    transcript: Dict[str, object] = {
        "user": user_id,
        "auth_id": auth_id,
        "r1": int_to_hex(commitment.r1),
        "r2": int_to_hex(commitment.r2),
        "c": int_to_hex(challenge),
        "s": int_to_hex(response),
    }
    try:
        session_id = service.verify_authentication(auth_id, response)
    except InvalidProof:
        transcript.update(success=False, session_id=None)
    else:
        transcript.update(success=True, session_id=session_id)
    return transcript


__all__ = ["AuthService", "authenticate"]
