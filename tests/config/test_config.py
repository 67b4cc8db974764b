import unittest

from gdriveaudit.config import AuditConfig, normalize_extensions


class TestAuditConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = AuditConfig()
        self.assertEqual(cfg.min_size_mb, 1.0)
        self.assertEqual(cfg.min_size_bytes, 1024 * 1024)
        self.assertEqual(cfg.max_files, 5000)
        self.assertEqual(cfg.page_size, 500)
        self.assertEqual(cfg.extensions, frozenset())
        self.assertEqual(cfg.retry_attempts, 0)
        self.assertEqual(cfg.max_workers, 1)

    def test_extensions_are_normalized(self) -> None:
        cfg = AuditConfig(extensions=frozenset({".PDF", " docx ", ""}))
        self.assertEqual(cfg.extensions, frozenset({"pdf", "docx"}))
        self.assertEqual(normalize_extensions(["..X", "x"]), frozenset({"x"}))

    def test_validation(self) -> None:
        bad = [
            {"min_size_mb": -1},
            {"max_files": 0},
            {"page_size": 0},
            {"retry_attempts": -1},
            {"max_workers": 0},
            {"top_overhead_limit": 0},
            {"output_dir": "  "},
        ]
        for kwargs in bad:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    AuditConfig(**kwargs)

    def test_fractional_min_size(self) -> None:
        self.assertEqual(AuditConfig(min_size_mb=0.5).min_size_bytes, 512 * 1024)
        self.assertEqual(AuditConfig(min_size_mb=0).min_size_bytes, 0)

    def test_from_env(self) -> None:
        cfg = AuditConfig.from_env(
            {
                "GDRIVEAUDIT_MIN_SIZE_MB": "2.5",
                "GDRIVEAUDIT_MAX_FILES": "10",
                "GDRIVEAUDIT_EXTENSIONS": "pdf, .DOCX,,",
                "GDRIVEAUDIT_RETRY_ATTEMPTS": "3",
                "GDRIVEAUDIT_MAX_WORKERS": "4",
                "GDRIVEAUDIT_OUTPUT_DIR": "/tmp/out",
                "GDRIVEAUDIT_PAGE_SIZE": "",
            }
        )
        self.assertEqual(cfg.min_size_mb, 2.5)
        self.assertEqual(cfg.max_files, 10)
        self.assertEqual(cfg.extensions, frozenset({"pdf", "docx"}))
        self.assertEqual(cfg.retry_attempts, 3)
        self.assertEqual(cfg.max_workers, 4)
        self.assertEqual(cfg.output_dir, "/tmp/out")
        self.assertEqual(cfg.page_size, 500)

    def test_from_env_rejects_bad_numbers(self) -> None:
        with self.assertRaises(ValueError):
            AuditConfig.from_env({"GDRIVEAUDIT_MAX_FILES": "many"})
        with self.assertRaises(ValueError):
            AuditConfig.from_env({"GDRIVEAUDIT_MAX_FILES": "0"})


if __name__ == "__main__":
    unittest.main()
