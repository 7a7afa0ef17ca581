"""Shared fixtures for the formrules test-suite."""
import pytest

from formrules.validation import Messages, Predicates, RuleFactory


@pytest.fixture
def messages():
    """English catalogue, independent of the LANGUAGE setting."""
    return Messages.for_language("en")


@pytest.fixture
def predicates():
    return Predicates()


@pytest.fixture
def factory(messages):
    return RuleFactory(messages)


@pytest.fixture
def uploaded_file(tmp_path):
    """Descriptor of a successfully uploaded file backed by a real temp file."""
    tmp_file = tmp_path / "php5F3A.tmp"
    tmp_file.write_bytes(b"%PDF-1.4 fake")
    return {
        "name": "report.pdf",
        "type": "application/pdf",
        "tmp_name": str(tmp_file),
        "error": 0,
        "size": tmp_file.stat().st_size,
    }
