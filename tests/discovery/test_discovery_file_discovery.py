import unittest
from datetime import datetime, timezone

from gdriveaudit.discovery import FileDiscovery, dedupe_by_path
from gdriveaudit.errors import DiscoveryError, NetworkError
from gdriveaudit.models import CandidateFile
from gdriveaudit.retry import RetryPolicy

MB = 1024 * 1024
DT = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _file(path: str, size: int, *, file_type: str = "application/pdf") -> CandidateFile:
    name = path.rsplit("/", 1)[-1]
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return CandidateFile(
        path=path,
        name=name,
        extension=ext,
        size=size,
        last_modified=DT,
        created=DT,
        file_type=file_type,
    )


class FakeIndex:
    """Serves a fixed row list with offset pagination."""

    def __init__(self, rows: list[CandidateFile], fail_at: set[int] | None = None) -> None:
        self.rows = rows
        self.calls: list[tuple[str, int, int]] = []
        self.fail_at = fail_at or set()

    def search(self, query, offset: int, page_size: int) -> list[CandidateFile]:
        self.calls.append((query.render(), offset, page_size))
        if offset in self.fail_at:
            raise NetworkError("index unreachable")
        return self.rows[offset : offset + page_size]


class TestFileDiscovery(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps: list[float] = []

    def _discovery(self, index: FakeIndex, **kwargs) -> FileDiscovery:
        kwargs.setdefault("page_delay_sec", 0)
        return FileDiscovery(index, sleep=self.sleeps.append, **kwargs)

    def test_three_files_sorted_by_size_desc(self) -> None:
        index = FakeIndex(
            [
                _file("/Docs/a.pdf", 10 * MB),
                _file("/Docs/b.pdf", 5 * MB),
                _file("/Docs/c.pdf", 20 * MB),
            ]
        )
        result = self._discovery(index).discover(MB, page_size=500, top_n=3)
        self.assertEqual([f.size for f in result], [20 * MB, 10 * MB, 5 * MB])
        self.assertEqual([f.rank for f in result], [0, 1, 2])

    def test_pagination_stops_on_short_page(self) -> None:
        rows = [_file(f"/Docs/f{i}.pdf", (i + 1) * MB) for i in range(7)]
        index = FakeIndex(rows)
        result = self._discovery(index).discover(MB, page_size=3, top_n=100)

        self.assertEqual(len(result), 7)
        self.assertEqual([c[1] for c in index.calls], [0, 3, 6])

    def test_pagination_stops_on_empty_page(self) -> None:
        rows = [_file(f"/Docs/f{i}.pdf", MB) for i in range(4)]
        index = FakeIndex(rows)
        self._discovery(index).discover(MB, page_size=2, top_n=100)
        self.assertEqual([c[1] for c in index.calls], [0, 2, 4])

    def test_page_delay_between_pages(self) -> None:
        rows = [_file(f"/Docs/f{i}.pdf", MB) for i in range(4)]
        index = FakeIndex(rows)
        FileDiscovery(index, page_delay_sec=0.25, sleep=self.sleeps.append).discover(
            MB, page_size=2, top_n=100
        )
        self.assertEqual(self.sleeps, [0.25, 0.25])

    def test_dedup_keeps_first_occurrence(self) -> None:
        first = _file("/Docs/dup.pdf", 3 * MB)
        later = _file("/Docs/dup.pdf", 9 * MB)
        index = FakeIndex([first, _file("/Docs/x.pdf", 2 * MB), later])
        result = self._discovery(index).discover(MB, page_size=10, top_n=10)

        paths = [f.path for f in result]
        self.assertEqual(len(paths), len(set(paths)))
        dup = next(f for f in result if f.path == "/Docs/dup.pdf")
        self.assertEqual(dup.size, 3 * MB)

    def test_dedup_across_pages(self) -> None:
        rows = [_file("/Docs/a.pdf", MB), _file("/Docs/b.pdf", MB), _file("/Docs/a.pdf", MB)]
        result = self._discovery(FakeIndex(rows)).discover(MB, page_size=2, top_n=10)
        self.assertEqual(sorted(f.path for f in result), ["/Docs/a.pdf", "/Docs/b.pdf"])

    def test_exclusions(self) -> None:
        rows = [
            _file("/Docs/keep.pdf", 2 * MB),
            _file("/Docs/_private/hidden.pdf", 2 * MB),
            _file("/Docs/Forms/AllItems.pdf", 2 * MB),
            _file("/SitePages/Home.aspx", 2 * MB, file_type="aspx"),
            _file("/Docs/survey", 2 * MB, file_type="application/vnd.google-apps.form"),
            _file("/Docs/small.pdf", MB - 1),
        ]
        result = self._discovery(FakeIndex(rows)).discover(MB, page_size=50, top_n=50)
        self.assertEqual([f.path for f in result], ["/Docs/keep.pdf"])

    def test_extension_filter(self) -> None:
        rows = [
            _file("/Docs/a.pdf", 2 * MB),
            _file("/Docs/b.DOCX", 2 * MB),
            _file("/Docs/c.xlsx", 2 * MB),
        ]
        index = FakeIndex(rows)
        result = self._discovery(index).discover(MB, {"docx", ".pdf"}, page_size=50, top_n=50)

        self.assertEqual(sorted(f.path for f in result), ["/Docs/a.pdf", "/Docs/b.DOCX"])
        self.assertIn("extension:docx OR extension:pdf", index.calls[0][0])

    def test_truncates_to_top_n(self) -> None:
        rows = [_file(f"/Docs/f{i}.pdf", (i + 1) * MB) for i in range(10)]
        result = self._discovery(FakeIndex(rows)).discover(MB, page_size=4, top_n=3)
        self.assertEqual([f.size for f in result], [10 * MB, 9 * MB, 8 * MB])

    def test_sorted_non_increasing_and_ties_keep_order(self) -> None:
        rows = [
            _file("/Docs/t1.pdf", 5 * MB),
            _file("/Docs/big.pdf", 8 * MB),
            _file("/Docs/t2.pdf", 5 * MB),
            _file("/Docs/t3.pdf", 5 * MB),
        ]
        result = self._discovery(FakeIndex(rows)).discover(MB, page_size=2, top_n=10)
        sizes = [f.size for f in result]
        for a, b in zip(sizes, sizes[1:]):
            self.assertGreaterEqual(a, b)
        self.assertEqual(
            [f.path for f in result],
            ["/Docs/big.pdf", "/Docs/t1.pdf", "/Docs/t2.pdf", "/Docs/t3.pdf"],
        )

    def test_empty_index_returns_empty_list(self) -> None:
        index = FakeIndex([])
        self.assertEqual(self._discovery(index).discover(MB), [])
        self.assertEqual(len(index.calls), 1)

    def test_search_failure_is_discovery_error(self) -> None:
        index = FakeIndex([_file("/Docs/a.pdf", MB)], fail_at={0})
        with self.assertRaises(DiscoveryError) as ctx:
            self._discovery(index).discover(MB)
        self.assertIsInstance(ctx.exception.cause, NetworkError)

    def test_search_failure_after_retries(self) -> None:
        index = FakeIndex([_file("/Docs/a.pdf", MB)], fail_at={0})
        policy = RetryPolicy(max_attempts=2, sleep=self.sleeps.append)
        with self.assertRaises(DiscoveryError) as ctx:
            self._discovery(index, retry_policy=policy).discover(MB)
        self.assertEqual(len(index.calls), 3)
        self.assertEqual(ctx.exception.details["attempts"], 3)

    def test_invalid_page_size(self) -> None:
        with self.assertRaises(ValueError):
            self._discovery(FakeIndex([])).discover(MB, page_size=0)


class TestDedupeByPath(unittest.TestCase):
    def test_preserves_order(self) -> None:
        files = [_file("/b", 1), _file("/a", 2), _file("/b", 3)]
        self.assertEqual([f.size for f in dedupe_by_path(files)], [1, 2])


if __name__ == "__main__":
    unittest.main()
