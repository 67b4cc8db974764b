import unittest
from datetime import datetime, timedelta, timezone

from gdriveaudit.util.time import (
    days_between,
    format_duration,
    format_timestamp,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    to_rfc3339,
)


class TestUtilTime(unittest.TestCase):
    def test_now_utc_is_tz_aware(self) -> None:
        dt = now_utc()
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_normalize_dt_rejects_naive(self) -> None:
        with self.assertRaises(ValueError):
            normalize_dt(datetime(2025, 1, 1, 12, 0, 0))

    def test_normalize_dt_rejects_non_datetime(self) -> None:
        with self.assertRaises(TypeError):
            normalize_dt(None)  # type: ignore[arg-type]

    def test_parse_rfc3339_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56Z")
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_offset_converts_to_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56+09:00")
        self.assertEqual(dt.tzinfo, timezone.utc)
        self.assertEqual(dt, datetime(2025, 1, 1, 3, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            parse_rfc3339("yesterday")

    def test_to_rfc3339_outputs_z(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        self.assertTrue(to_rfc3339(dt).endswith("Z"))

    def test_days_between_rounds_to_one_decimal(self) -> None:
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        end = start + timedelta(days=10, hours=6)
        self.assertEqual(days_between(start, end), 10.2)

    def test_format_timestamp(self) -> None:
        dt = parse_rfc3339("2025-03-04T05:06:07+01:00")
        self.assertEqual(format_timestamp(dt), "2025-03-04 04:06:07")

    def test_format_duration(self) -> None:
        self.assertEqual(format_duration(0), "0:00:00")
        self.assertEqual(format_duration(3725), "1:02:05")
        self.assertEqual(format_duration(-3), "0:00:00")


if __name__ == "__main__":
    unittest.main()
