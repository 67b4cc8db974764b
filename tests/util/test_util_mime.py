import unittest

from gdriveaudit.util.mime import (
    FOLDER_MIME,
    extension_of,
    is_folder,
    is_page_artifact,
    is_system_path,
)


class TestUtilMime(unittest.TestCase):
    def test_is_folder(self) -> None:
        self.assertTrue(is_folder(FOLDER_MIME))
        self.assertFalse(is_folder("text/plain"))

    def test_is_page_artifact(self) -> None:
        self.assertTrue(is_page_artifact("application/vnd.google-apps.form"))
        self.assertTrue(is_page_artifact("application/vnd.google-apps.site"))
        self.assertTrue(is_page_artifact(FOLDER_MIME))
        self.assertTrue(is_page_artifact("aspx"))
        self.assertTrue(is_page_artifact("text/html", "ASPX"))

        self.assertFalse(is_page_artifact("application/pdf", "pdf"))
        self.assertFalse(is_page_artifact("application/vnd.google-apps.document"))

    def test_is_system_path(self) -> None:
        self.assertTrue(is_system_path("/Shared/_catalogs/masterpage/x.docx"))
        self.assertTrue(is_system_path("/Shared/Documents/Forms/template.dotx"))
        self.assertTrue(is_system_path("_hidden.docx"))

        self.assertFalse(is_system_path("/Shared/Documents/report.docx"))
        self.assertFalse(is_system_path("/Shared/My_Forms/report_v2.docx"))
        self.assertFalse(is_system_path("/Shared/FormsArchive/a.pdf"))

    def test_extension_of(self) -> None:
        self.assertEqual(extension_of("Report.DOCX"), "docx")
        self.assertEqual(extension_of("archive.tar.gz"), "gz")
        self.assertEqual(extension_of("README"), "")
        self.assertEqual(extension_of(".bashrc"), "")
        self.assertEqual(extension_of("trailing."), "")
        self.assertEqual(extension_of("/a.b/c"), "")


if __name__ == "__main__":
    unittest.main()
