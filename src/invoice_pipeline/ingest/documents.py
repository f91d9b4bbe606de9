"""Download invoice documents (PDFs) to a local directory."""

from __future__ import annotations

import logging
from pathlib import Path

import requests  # type: ignore[import-untyped]

from invoice_pipeline.errors import DocumentRetrievalError

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def retrieve_and_save_document(
    locator: str,
    suggested_name: str,
    out_dir: Path,
    timeout: float = 30.0,
) -> Path:
    """Download the document at `locator` and save it as `out_dir/suggested_name`.

    Args:
        locator: HTTP(S) URL of the document.
        suggested_name: File name to save under (no directories).
        out_dir: Target directory, created if missing.
        timeout: Request timeout in seconds.

    Returns:
        Path of the saved file.

    Raises:
        DocumentRetrievalError: if the locator is empty or not HTTP(S), the
            request fails, or the server answers with a non-2xx status.
        OSError: if writing the file fails; the partial file is removed.
    """
    locator = (locator or "").strip()
    if not locator.startswith(("http://", "https://")):
        raise DocumentRetrievalError(f"Invalid document locator: {locator!r}")

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / Path(suggested_name).name

    log.info("Downloading %s", locator)
    try:
        with requests.get(locator, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with out_path.open("wb") as fh:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
    except requests.RequestException as e:
        out_path.unlink(missing_ok=True)
        raise DocumentRetrievalError(f"Download failed for {locator}: {e}") from e
    except OSError:
        # RequestException subclasses OSError; keep this branch after it
        out_path.unlink(missing_ok=True)
        raise

    log.info("Saved: %s (%d bytes)", out_path, out_path.stat().st_size)
    return out_path
