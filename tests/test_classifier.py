"""Tests for document type detection"""

import pytest

from testimony_prep.models.document import DocumentType
from testimony_prep.services.classifier import classify


class TestClassify:

    @pytest.mark.parametrize("filename, content, expected", [
        ("Smith_Deposition.pdf", None, DocumentType.TRANSCRIPT),
        ("hearing transcript.txt", "", DocumentType.TRANSCRIPT),
        ("notes.txt", "Q: Where were you?\nA: At home.", DocumentType.TRANSCRIPT),
        ("witness_statement.txt", "", DocumentType.PRIOR_TESTIMONY),
        ("notes.txt", "The declarant, being duly sworn, states", DocumentType.PRIOR_TESTIMONY),
        ("Exhibit A.pdf", "", DocumentType.EXHIBIT),
        ("ex-12.pdf", "", DocumentType.EXHIBIT),
        ("EX_3 invoice.pdf", "", DocumentType.EXHIBIT),
        ("complaint.pdf", "", DocumentType.CASE_FILE),
        ("motion_to_dismiss.pdf", "", DocumentType.CASE_FILE),
        ("photo log.txt", "nothing of note here", DocumentType.OTHER),
    ])
    def test_rules(self, filename, content, expected):
        assert classify(filename, content) == expected

    def test_transcript_beats_exhibit(self):
        assert classify("exhibit_deposition.pdf") == DocumentType.TRANSCRIPT

    def test_testimony_beats_case_file(self):
        assert classify("motion.pdf", "Testified under oath that") == DocumentType.PRIOR_TESTIMONY

    def test_exhibit_needs_name_match(self):
        assert classify("notes.txt", "see exhibit 4") == DocumentType.OTHER

    def test_case_insensitive(self):
        assert classify("BRIEF.PDF") == DocumentType.CASE_FILE
