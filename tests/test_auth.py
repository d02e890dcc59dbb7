import threading
import unittest

from cpauth.auth import AuthService, authenticate
from cpauth.config import Settings
from cpauth.constants import get_group
from cpauth.crypto import DeterministicRandomSource, Prover, commit, generate_secret, solve
from cpauth.exceptions import InvalidProof, MalformedInput, NotFound
from cpauth.store import UserStore

PARAMS = get_group("rfc5114-1024-160")
TOY = get_group("toy")


class FixedChallengeSource(DeterministicRandomSource):
    """Returns ``challenge`` whenever the server samples below q."""

    def __init__(self, q: int, challenge: int) -> None:
        super().__init__(seed=0)
        self._q = q
        self._challenge = challenge

    def below(self, bound: int) -> int:
        if bound == self._q:
            return self._challenge
        return super().below(bound)


class TestAuthService(unittest.TestCase):
    def setUp(self) -> None:
        self.service = AuthService(PARAMS)
        self.prover = Prover(PARAMS, generate_secret(PARAMS))
        self.service.register("alice", *self.prover.public_commitment())

    def test_successful_login_issues_token(self) -> None:
        commitment = self.prover.commit()
        auth_id, c = self.service.create_challenge("alice", commitment.r1, commitment.r2)
        self.assertTrue(0 <= c < PARAMS.q)
        self.assertEqual(len(auth_id), 32)

        token = self.service.verify_authentication(auth_id, self.prover.respond(commitment, c))
        self.assertIsInstance(token, str)
        self.assertTrue(token)
        self.assertNotIn(auth_id, self.service.sessions)

    def test_session_is_single_use(self) -> None:
        commitment = self.prover.commit()
        auth_id, c = self.service.create_challenge("alice", commitment.r1, commitment.r2)
        s = self.prover.respond(commitment, c)
        self.service.verify_authentication(auth_id, s)
        with self.assertRaises(NotFound):
            self.service.verify_authentication(auth_id, s)
        with self.assertRaises(NotFound):
            self.service.verify_authentication(auth_id, 0)

    def test_rejected_session_cannot_be_retried(self) -> None:
        commitment = self.prover.commit()
        auth_id, c = self.service.create_challenge("alice", commitment.r1, commitment.r2)
        s = self.prover.respond(commitment, c)
        with self.assertRaises(InvalidProof):
            self.service.verify_authentication(auth_id, (s + 1) % PARAMS.q)
        with self.assertRaises(NotFound):
            self.service.verify_authentication(auth_id, s)
        self.assertEqual(len(self.service.sessions), 0)

    def test_unknown_user_challenge(self) -> None:
        with self.assertRaises(NotFound):
            self.service.create_challenge("nonexistent", 1, 1)
        self.assertEqual(len(self.service.sessions), 0)

    def test_unknown_auth_id(self) -> None:
        with self.assertRaises(NotFound):
            self.service.verify_authentication("deadbeef", 1)

    def test_user_removed_before_verification(self) -> None:
        commitment = self.prover.commit()
        auth_id, c = self.service.create_challenge("alice", commitment.r1, commitment.r2)
        self.service.users = UserStore()
        with self.assertRaises(NotFound):
            self.service.verify_authentication(auth_id, self.prover.respond(commitment, c))

    def test_wrong_secret_rejected(self) -> None:
        impostor = Prover(PARAMS, (self.prover.secret % (PARAMS.q - 1)) + 1)
        commitment = impostor.commit()
        auth_id, c = self.service.create_challenge("alice", commitment.r1, commitment.r2)
        if c == 0:  # pragma: no cover - probability 2**-160
            self.skipTest("zero challenge")
        with self.assertRaises(InvalidProof):
            self.service.verify_authentication(auth_id, impostor.respond(commitment, c))

    def test_reregistration_overwrites(self) -> None:
        replacement = Prover(PARAMS, generate_secret(PARAMS))
        self.service.register("alice", *replacement.public_commitment())
        self.assertEqual(self.service.users.get("alice").y1, replacement.public_commitment()[0])

        result = authenticate(self.service, "alice", replacement)
        self.assertTrue(result["success"])

    def test_challenges_are_independent(self) -> None:
        first = self.prover.commit()
        second = self.prover.commit()
        id1, c1 = self.service.create_challenge("alice", first.r1, first.r2)
        id2, c2 = self.service.create_challenge("alice", second.r1, second.r2)
        self.assertNotEqual(id1, id2)
        self.service.verify_authentication(id2, self.prover.respond(second, c2))
        self.service.verify_authentication(id1, self.prover.respond(first, c1))


class TestWorkedExampleService(unittest.TestCase):
    def test_fixed_challenge_vector(self) -> None:
        service = AuthService(TOY, FixedChallengeSource(TOY.q, 4))
        service.register("peggy", *commit(TOY, 6))
        auth_id, c = service.create_challenge("peggy", 8, 4)
        self.assertEqual(c, 4)
        self.assertTrue(service.verify_authentication(auth_id, 5))

        auth_id, _ = service.create_challenge("peggy", 8, 4)
        with self.assertRaises(InvalidProof):
            service.verify_authentication(auth_id, solve(TOY, 7, 4, 15))


class TestConcurrency(unittest.TestCase):
    def test_concurrent_verification_issues_one_token(self) -> None:
        service = AuthService(PARAMS)
        prover = Prover(PARAMS, generate_secret(PARAMS))
        service.register("alice", *prover.public_commitment())
        commitment = prover.commit()
        auth_id, c = service.create_challenge("alice", commitment.r1, commitment.r2)
        s = prover.respond(commitment, c)

        workers = 8
        barrier = threading.Barrier(workers)
        tokens = []
        misses = []
        lock = threading.Lock()

        def attempt() -> None:
            barrier.wait()
            try:
                token = service.verify_authentication(auth_id, s)
            except NotFound:
                with lock:
                    misses.append(1)
            else:
                with lock:
                    tokens.append(token)

        threads = [threading.Thread(target=attempt) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(tokens), 1)
        self.assertEqual(len(misses), workers - 1)

    def test_parallel_logins_for_many_users(self) -> None:
        service = AuthService(PARAMS)
        provers = {f"user{i}": Prover(PARAMS, generate_secret(PARAMS)) for i in range(6)}
        for user_id, prover in provers.items():
            service.register(user_id, *prover.public_commitment())

        results = {}
        lock = threading.Lock()

        def login(user_id: str) -> None:
            outcomes = [authenticate(service, user_id, provers[user_id])["success"] for _ in range(3)]
            with lock:
                results[user_id] = outcomes

        threads = [threading.Thread(target=login, args=(user_id,)) for user_id in provers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(results, {user_id: [True, True, True] for user_id in provers})
        self.assertEqual(len(service.sessions), 0)


class TestStrictMode(unittest.TestCase):
    def test_out_of_range_values_rejected(self) -> None:
        service = AuthService(TOY, strict=True)
        with self.assertRaises(MalformedInput):
            service.register("peggy", TOY.p, 3)
        service.register("peggy", 2, 3)
        self.assertEqual(len(service.users), 1)
        with self.assertRaises(MalformedInput):
            service.create_challenge("peggy", 8, TOY.p + 5)
        self.assertEqual(len(service.sessions), 0)
        auth_id, _ = service.create_challenge("peggy", 8, 4)
        with self.assertRaises(MalformedInput):
            service.verify_authentication(auth_id, TOY.q)
        self.assertIn(auth_id, service.sessions)

    def test_lenient_mode_accepts_any_value(self) -> None:
        service = AuthService(TOY)
        service.register("peggy", TOY.p + 100, 3)
        self.assertEqual(service.users.get("peggy").y1, TOY.p + 100)

    def test_from_settings(self) -> None:
        service = AuthService.from_settings(Settings(group="toy", strict=True))
        self.assertEqual(service.params, TOY)
        self.assertTrue(service.strict)


if __name__ == "__main__":
    unittest.main()
