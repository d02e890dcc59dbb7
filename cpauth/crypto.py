"""Core arithmetic for the Chaum-Pedersen proof of discrete log equality."""

from __future__ import annotations

import random as _random
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import GroupParameters


class RandomSource:
    """Uniform sampling of integers below a bound."""

    def below(self, bound: int) -> int:
        raise NotImplementedError


class SystemRandomSource(RandomSource):
    """Cryptographically secure source backed by the operating system."""

    def below(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError("Bound must be positive")
        return secrets.randbelow(bound)


class DeterministicRandomSource(RandomSource):
    """Seeded, reproducible source. Never use outside of tests."""

    def __init__(self, seed: int = 0) -> None:
        self._rng = _random.Random(seed)

    def below(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError("Bound must be positive")
        return self._rng.randrange(bound)


def token_hex(source: RandomSource, nbytes: int) -> str:
    """Opaque random identifier of ``nbytes`` bytes, hex encoded."""

    return source.below(256**nbytes).to_bytes(nbytes, "big").hex()


def commit(params: GroupParameters, secret: int) -> Tuple[int, int]:
    if not 0 <= secret < params.q:
        raise ValueError("Exponent must lie in [0, q)")
    return pow(params.g, secret, params.p), pow(params.h, secret, params.p)


def solve(params: GroupParameters, k: int, c: int, x: int) -> int:
    """Response s = (k - c*x) mod q, normalized into [0, q)."""

    product = c * x
    if k >= product:
        return (k - product) % params.q
    return (params.q - (product - k) % params.q) % params.q


def verify(
    params: GroupParameters,
    r1: int,
    r2: int,
    y1: int,
    y2: int,
    c: int,
    s: int,
) -> bool:
    p = params.p
    first = (pow(params.g, s, p) * pow(y1, c, p)) % p
    second = (pow(params.h, s, p) * pow(y2, c, p)) % p
    return r1 == first and r2 == second


@dataclass
class EphemeralCommitment:
    """Per-attempt commitment; the nonce stays with the prover."""

    nonce: int
    r1: int
    r2: int


class Prover:
    """Holds the long-lived secret and answers challenges."""

    def __init__(
        self,
        params: GroupParameters,
        secret: int,
        random: Optional[RandomSource] = None,
    ) -> None:
        if not 0 < secret < params.q:
            raise ValueError("Secret must lie in [1, q)")
        self.params = params
        self.secret = secret
        self.random = random or SystemRandomSource()

    def public_commitment(self) -> Tuple[int, int]:
        return commit(self.params, self.secret)

    def random_nonce(self) -> int:
        return self.random.below(self.params.q - 1) + 1

    def commit(self) -> EphemeralCommitment:
        nonce = self.random_nonce()
        r1, r2 = commit(self.params, nonce)
        return EphemeralCommitment(nonce=nonce, r1=r1, r2=r2)

    def respond(self, commitment: EphemeralCommitment, challenge: int) -> int:
        if not 0 <= challenge < self.params.q:
            raise ValueError("Challenge outside of [0, q)")
        return solve(self.params, commitment.nonce, challenge, self.secret)


def generate_secret(params: GroupParameters, random: Optional[RandomSource] = None) -> int:
    """Generate a fresh secret in [1, q)."""

    source = random or SystemRandomSource()
    return source.below(params.q - 1) + 1


__all__ = [
    "DeterministicRandomSource",
    "EphemeralCommitment",
    "Prover",
    "RandomSource",
    "SystemRandomSource",
    "commit",
    "generate_secret",
    "solve",
    "token_hex",
    "verify",
]
