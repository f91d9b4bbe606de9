from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import requests

from invoice_pipeline.errors import DocumentRetrievalError
from invoice_pipeline.ingest import documents
from invoice_pipeline.ingest.documents import retrieve_and_save_document


class FakeStream:
    def __init__(self, chunks: list[bytes], status: int = 200) -> None:
        self.chunks = chunks
        self.status_code = status

    def __enter__(self) -> "FakeStream":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size: int = 1) -> Any:
        return iter(self.chunks)


def test_saves_streamed_content(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        documents.requests, "get", lambda url, **kw: FakeStream([b"%PDF-", b"", b"1.7"])
    )
    out = retrieve_and_save_document("https://x/a.pdf", "UC1_Jan.pdf", tmp_path / "out")
    assert out == tmp_path / "out" / "UC1_Jan.pdf"
    assert out.read_bytes() == b"%PDF-1.7"


def test_suggested_name_cannot_escape_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(documents.requests, "get", lambda url, **kw: FakeStream([b"x"]))
    out = retrieve_and_save_document("https://x/a.pdf", "../../evil.pdf", tmp_path)
    assert out == tmp_path / "evil.pdf"


@pytest.mark.parametrize("locator", ["", "   ", "ftp://x/a.pdf", "file:///etc/passwd"])
def test_invalid_locator(tmp_path: Path, locator: str) -> None:
    with pytest.raises(DocumentRetrievalError):
        retrieve_and_save_document(locator, "a.pdf", tmp_path)


def test_http_failure_leaves_no_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(documents.requests, "get", lambda url, **kw: FakeStream([], status=404))
    with pytest.raises(DocumentRetrievalError):
        retrieve_and_save_document("https://x/a.pdf", "a.pdf", tmp_path)
    assert not (tmp_path / "a.pdf").exists()


class FailingWriteStream(FakeStream):
    def iter_content(self, chunk_size: int = 1) -> Any:
        yield b"%PDF-"
        raise OSError("No space left on device")


def test_write_failure_removes_partial_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(documents.requests, "get", lambda url, **kw: FailingWriteStream([]))
    with pytest.raises(OSError, match="No space left"):
        retrieve_and_save_document("https://x/a.pdf", "a.pdf", tmp_path)
    assert not (tmp_path / "a.pdf").exists()
