"""Shared test fixtures for pyinifile."""

import pytest

from pyinifile import IniDocument, IniOption


@pytest.fixture
def ini_file(tmp_path):
    """Write arbitrary INI text to a temp file.

    Returns a helper function. Call it with the text (and optionally an
    encoding), it returns the path written.
    """
    def _write(content: str, encoding: str = "utf-8", name: str = "test.ini"):
        path = tmp_path / name
        path.write_bytes(content.encode(encoding))
        return path
    return _write


@pytest.fixture
def sample_doc():
    """A document with a default block and two named sections."""
    doc = IniDocument(IniOption.ALL)
    doc.put(None, "b", "2")
    doc.put(None, "a", "1")
    doc.put("Zeta", "z", "26")
    doc.put("Alpha", "y", "25")
    doc.put("Alpha", "x", "24")
    return doc
