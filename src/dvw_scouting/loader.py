"""Load DVW files from disk or over HTTP and decode them in batches."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

import requests

from .match import DVWStructureError, MatchResult, parse_match
from .stats import ScoutingOverview, build_overview
from .text import DEFAULT_ENCODING, decode_dvw_bytes

LOGGER = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; dvw-scouting/0.1)"
}
DEFAULT_RETRIES = 3
REQUEST_TIMEOUT_SECONDS = 30
DEFAULT_DELAY_SECONDS = 2.0
DVW_SUFFIXES = (".dvw",)

# Failures that skip one source in a batch instead of aborting it.
SOURCE_ERRORS = (DVWStructureError, UnicodeDecodeError, OSError, requests.RequestException)

Source = Union[str, Path]


@dataclass(frozen=True)
class FileFailure:
    source: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "error": self.error}


@dataclass(frozen=True)
class BatchResult:
    matches: Tuple[MatchResult, ...] = ()
    failures: Tuple[FileFailure, ...] = ()

    def overview(self) -> ScoutingOverview:
        return build_overview(self.matches)

    def to_dict(self) -> Dict[str, object]:
        return {
            "matches": [match.to_dict() for match in self.matches],
            "failures": [failure.to_dict() for failure in self.failures],
        }


def _http_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    retries: int = DEFAULT_RETRIES,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
) -> requests.Response:
    """GET ``url``, retrying HTTP errors and timeouts with exponential backoff.

    Connection and proxy failures are raised on the first attempt.
    """

    if retries < 1:
        raise ValueError(f"retries must be at least 1, got {retries}")
    merged_headers = dict(REQUEST_HEADERS)
    if headers:
        merged_headers.update(headers)
    attempt = 0
    while True:
        try:
            response = requests.get(url, timeout=REQUEST_TIMEOUT_SECONDS, headers=merged_headers)
            response.raise_for_status()
            return response
        except (requests.exceptions.ProxyError, requests.exceptions.ConnectionError):
            raise
        except requests.RequestException as exc:
            if attempt == retries - 1:
                raise
            backoff = delay_seconds * (2 ** attempt)
            LOGGER.debug("Retrying %s in %.1fs after %s", url, backoff, exc)
            time.sleep(backoff)
            attempt += 1


def is_url(source: Source) -> bool:
    if isinstance(source, Path):
        return False
    return urlparse(source).scheme in ("http", "https")


def load_match_file(path: Source, *, encoding: str = DEFAULT_ENCODING) -> MatchResult:
    """Read and decode a DVW file from disk."""

    file_path = Path(path)
    content = decode_dvw_bytes(file_path.read_bytes(), encoding=encoding)
    return parse_match(content, source=str(file_path))


def fetch_match_file(
    url: str,
    *,
    encoding: str = DEFAULT_ENCODING,
    retries: int = DEFAULT_RETRIES,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
) -> MatchResult:
    """Download a DVW file and decode it."""

    response = _http_get(url, retries=retries, delay_seconds=delay_seconds)
    content = decode_dvw_bytes(response.content, encoding=encoding)
    return parse_match(content, source=url)


def load_source(source: Source, *, encoding: str = DEFAULT_ENCODING) -> MatchResult:
    if is_url(source):
        return fetch_match_file(str(source), encoding=encoding)
    return load_match_file(source, encoding=encoding)


def find_match_files(directory: Source) -> List[Path]:
    root = Path(directory)
    return sorted(
        path
        for path in root.iterdir()
        if path.is_file() and path.suffix.lower() in DVW_SUFFIXES
    )


def parse_match_sources(
    sources: Iterable[Source],
    *,
    encoding: str = DEFAULT_ENCODING,
) -> BatchResult:
    """Decode every source, keeping going past the ones that fail.

    Sources are local paths or http(s) URLs. Each failure is reported in
    :attr:`BatchResult.failures` and logged; the matches keep input order.
    """

    matches: List[MatchResult] = []
    failures: List[FileFailure] = []
    for source in sources:
        try:
            matches.append(load_source(source, encoding=encoding))
        except SOURCE_ERRORS as exc:
            LOGGER.warning("Skipping %s: %s", source, exc)
            failures.append(FileFailure(source=str(source), error=str(exc)))

    LOGGER.info("Decoded %d matches, %d failed", len(matches), len(failures))
    return BatchResult(matches=tuple(matches), failures=tuple(failures))


def parse_match_directory(
    directory: Source,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> BatchResult:
    return parse_match_sources(find_match_files(directory), encoding=encoding)


__all__ = [
    "BatchResult",
    "DEFAULT_DELAY_SECONDS",
    "DEFAULT_RETRIES",
    "DVW_SUFFIXES",
    "FileFailure",
    "REQUEST_HEADERS",
    "fetch_match_file",
    "find_match_files",
    "is_url",
    "load_match_file",
    "load_source",
    "parse_match_directory",
    "parse_match_sources",
]
