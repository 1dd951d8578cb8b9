"""
Test reference scanner
"""
from paperlens.core.reference_scanner import find_references_start, scan_references


NUMBERED = """Conclusion text here.
References
[1] A. Smith, "Title one,"
Journal of Tests, 2020.
[2] B. Jones, "Title two," 2021.
"""

APA = """Discussion.
Bibliography:
Smith, J. (2020). Learning things quickly.
   Journal of X, 3(2), 10-20.

Doe, A. (2019). Other work.
"""


class TestScanReferences:
    """Test scan_references"""

    def test_numbered_entries_with_wrapped_lines(self):
        """Test continuation lines join the previous entry"""
        assert scan_references(NUMBERED) == [
            '[1] A. Smith, "Title one," Journal of Tests, 2020.',
            '[2] B. Jones, "Title two," 2021.',
        ]

    def test_author_year_entries(self):
        """Test APA-style entries split on Author (Year) lines"""
        assert scan_references(APA) == [
            "Smith, J. (2020). Learning things quickly. Journal of X, 3(2), 10-20.",
            "Doe, A. (2019). Other work.",
        ]

    def test_no_header(self):
        """Test text without a references header"""
        assert scan_references("Just an essay without sources.") == []
        assert scan_references("") == []
        assert find_references_start("nothing") == -1

    def test_idempotent(self):
        """Test repeated scans give the same list"""
        assert scan_references(NUMBERED) == scan_references(NUMBERED)

    def test_window_limits_scan(self):
        """Test entries beyond the window are not read"""
        text = "References\n" + "\n".join(f"[{index}] Entry {index}" for index in range(1, 200))
        entries = scan_references(text, window=40)
        assert entries[0] == "[1] Entry 1"
        assert len(entries) < 10
