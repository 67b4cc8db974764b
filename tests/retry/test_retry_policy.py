import unittest

from gdriveaudit.errors import AnalysisError, NetworkError, RateLimitError, RetryExhaustedError
from gdriveaudit.retry import RetryPolicy


class _Flaky:
    """Fails `failures` times with `error`, then returns 'ok'."""

    def __init__(self, failures: int, error: Exception) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


class TestRetryPolicy(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps: list[float] = []

    def _policy(self, max_attempts: int) -> RetryPolicy:
        return RetryPolicy(max_attempts=max_attempts, sleep=self.sleeps.append)

    def test_success_first_try(self) -> None:
        op = _Flaky(0, NetworkError("x"))
        outcome = self._policy(3).execute(op, label="op")
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.value, "ok")
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(self.sleeps, [])

    def test_zero_budget_means_single_attempt(self) -> None:
        op = _Flaky(10, NetworkError("down"))
        outcome = self._policy(0).execute(op)
        self.assertFalse(outcome.ok)
        self.assertEqual(op.calls, 1)
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(self.sleeps, [])

    def test_budget_k_allows_k_plus_one_attempts(self) -> None:
        for k in (1, 2, 3, 5):
            self.sleeps = []
            op = _Flaky(100, NetworkError("down"))
            outcome = self._policy(k).execute(op, label="always fails")
            self.assertFalse(outcome.ok)
            self.assertEqual(op.calls, k + 1)
            self.assertIsInstance(outcome.error, NetworkError)
            self.assertEqual(outcome.label, "always fails")

    def test_exponential_backoff_schedule(self) -> None:
        op = _Flaky(100, NetworkError("down"))
        self._policy(3).execute(op)
        self.assertEqual(self.sleeps, [5.0, 10.0, 20.0])

    def test_recovers_after_transient_failures(self) -> None:
        op = _Flaky(2, NetworkError("blip"))
        outcome = self._policy(3).execute(op)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.attempts, 3)
        self.assertEqual(self.sleeps, [5.0, 10.0])

    def test_rate_limit_inserts_cooldown_before_backoff(self) -> None:
        op = _Flaky(1, RateLimitError("429"))
        outcome = self._policy(2).execute(op)
        self.assertTrue(outcome.ok)
        self.assertEqual(self.sleeps, [30.0, 5.0])

    def test_rate_limit_cooldown_applies_on_last_attempt(self) -> None:
        op = _Flaky(100, RateLimitError("429"))
        outcome = self._policy(1).execute(op)
        self.assertFalse(outcome.ok)
        self.assertEqual(self.sleeps, [30.0, 5.0, 30.0])

    def test_custom_rate_limit_predicate(self) -> None:
        policy = RetryPolicy(
            max_attempts=0,
            is_rate_limited=lambda exc: "throttle" in str(exc),
            sleep=self.sleeps.append,
        )
        policy.execute(_Flaky(1, RuntimeError("throttled")))
        self.assertEqual(self.sleeps, [30.0])

    def test_malformed_payload_is_not_retried(self) -> None:
        op = _Flaky(5, AnalysisError("Malformed revision entry"))
        outcome = self._policy(3).execute(op, label="versions")
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(op.calls, 1)
        self.assertIsInstance(outcome.error, AnalysisError)
        self.assertEqual(self.sleeps, [])

    def test_unwrap(self) -> None:
        ok = self._policy(0).execute(lambda: 42)
        self.assertEqual(ok.unwrap(), 42)

        failed = self._policy(0).execute(_Flaky(1, NetworkError("down")), label="fetch")
        with self.assertRaises(RetryExhaustedError) as ctx:
            failed.unwrap()
        self.assertIsInstance(ctx.exception.cause, NetworkError)
        self.assertEqual(ctx.exception.details["label"], "fetch")

    def test_negative_budget_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=-1)


if __name__ == "__main__":
    unittest.main()
