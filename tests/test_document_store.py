"""
Test local document store
"""
from paperlens.core.document_store import LocalDocumentStore, _normalize_page_text


def _store_with_paper(tmp_path, content="Abstract: stored paper text."):
    root = tmp_path / "root"
    upload_dir = root / "uploads" / "research"
    upload_dir.mkdir(parents=True)
    (upload_dir / "paper.txt").write_text(content, encoding="utf-8")
    return LocalDocumentStore(root=str(root)), root


class TestLocalDocumentStore:
    """Test LocalDocumentStore"""

    def test_read_by_upload_path(self, tmp_path):
        """Test /uploads/... and uploads/... forms"""
        store, _ = _store_with_paper(tmp_path)
        assert store.read_document_text("/uploads/research/paper.txt") == "Abstract: stored paper text."
        assert store.read_document_text("uploads/research/paper.txt") == "Abstract: stored paper text."

    def test_read_by_bare_name(self, tmp_path):
        """Test bare file names resolve under the upload folder"""
        store, _ = _store_with_paper(tmp_path)
        assert store.read_document_text("paper.txt") == "Abstract: stored paper text."

    def test_read_absolute_path_inside_root(self, tmp_path):
        """Test absolute paths under the root"""
        store, root = _store_with_paper(tmp_path)
        path = root / "uploads" / "research" / "paper.txt"
        assert store.read_document_text(str(path)) == "Abstract: stored paper text."

    def test_missing_document(self, tmp_path):
        """Test missing files give None"""
        store, _ = _store_with_paper(tmp_path)
        assert store.read_document_text("absent.pdf") is None
        assert store.read_document_text(None) is None
        assert store.read_document_text("") is None

    def test_refuses_paths_outside_root(self, tmp_path):
        """Test traversal outside the root is never read"""
        store, _ = _store_with_paper(tmp_path)
        (tmp_path / "secret.txt").write_text("secret", encoding="utf-8")

        assert store.read_document_text("/uploads/../../secret.txt") is None
        assert store.read_document_text(str(tmp_path / "secret.txt")) is None

    def test_unreadable_pdf(self, tmp_path):
        """Test corrupt PDFs give None instead of raising"""
        store, root = _store_with_paper(tmp_path)
        (root / "uploads" / "research" / "broken.pdf").write_bytes(b"not a pdf at all")
        assert store.read_document_text("broken.pdf") is None


class TestNormalizePageText:
    """Test PDF page text cleanup"""

    def test_joins_hyphenated_lines(self):
        """Test hyphenation and spacing cleanup"""
        assert _normalize_page_text("inter-\nnational  study  \r") == "international study"
