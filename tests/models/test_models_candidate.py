import dataclasses
import unittest
from datetime import datetime, timezone

from gdriveaudit.models import UNKNOWN, CandidateFile, OwnershipInfo


class TestCandidateFile(unittest.TestCase):
    def setUp(self) -> None:
        self.dt = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_defaults(self) -> None:
        f = CandidateFile(
            path="/Docs/a.pdf",
            name="a.pdf",
            extension="pdf",
            size=10,
            last_modified=self.dt,
            created=self.dt,
        )
        self.assertIsNone(f.last_viewed)
        self.assertIsNone(f.checkout_user)
        self.assertEqual(f.views_lifetime, 0)
        self.assertEqual(f.rank, 0)
        # Without a remote id the path is used for lookups.
        self.assertEqual(f.remote_id, "/Docs/a.pdf")

    def test_remote_id_prefers_item_id(self) -> None:
        f = CandidateFile(
            path="/Docs/a.pdf",
            name="a.pdf",
            extension="pdf",
            size=10,
            last_modified=self.dt,
            created=self.dt,
            item_id="F1",
        )
        self.assertEqual(f.remote_id, "F1")

    def test_is_immutable_and_with_rank_copies(self) -> None:
        f = CandidateFile(
            path="/a", name="a", extension="", size=1, last_modified=self.dt, created=self.dt
        )
        with self.assertRaises(dataclasses.FrozenInstanceError):
            f.size = 2  # type: ignore[misc]

        ranked = f.with_rank(7)
        self.assertEqual(ranked.rank, 7)
        self.assertEqual(f.rank, 0)
        self.assertEqual(ranked.path, f.path)


class TestOwnershipInfo(unittest.TestCase):
    def test_defaults(self) -> None:
        info = OwnershipInfo(owner="Ann", last_accessed_date=None)
        self.assertIsNone(info.owner_email)
        self.assertEqual(info.last_accessed_by, UNKNOWN)


if __name__ == "__main__":
    unittest.main()
