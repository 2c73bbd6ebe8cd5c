from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from ..errors import InvalidSourceUrl, RosterImportError, SourceUnreachable
from .reader import RawGrid, read_csv_bytes, read_file_source, read_workbook_bytes

"""Source resolution: URL / uploaded bytes -> RawGrid.

Hosted spreadsheets can be exported in several ways and which one works
depends on sharing settings and on the sheet itself. The resolver builds an
ordered list of FetchStrategy objects and tries them one after another; the
first strategy that downloads *and* decodes wins. Individual failures are only
logged; ``SourceUnreachable`` is raised once the list is exhausted.
"""

__all__ = [
    "UrlSource",
    "FileSource",
    "Source",
    "FetchStrategy",
    "extract_sheet_id",
    "extract_gid",
    "build_strategies",
    "fetch_grid",
    "resolve_source",
]

logger = logging.getLogger(__name__)

SHEETS_BASE = "https://docs.google.com/spreadsheets/d"
_SHEET_ID_RE = re.compile(r"/spreadsheets/d/([A-Za-z0-9_-]+)")
_GID_RE = re.compile(r"[#&?]gid=(\d+)")


@dataclass(frozen=True)
class UrlSource:
    url: str

    @property
    def label(self) -> str:
        return self.url


@dataclass(frozen=True)
class FileSource:
    data: bytes
    extension: str  # "xlsx", ".csv", ...
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or f"<upload>.{self.extension.lstrip('.')}"


Source = UrlSource | FileSource


@dataclass(frozen=True)
class FetchStrategy:
    """One export attempt: where to download from and how to decode the body."""
    label: str
    url: str
    decode: Callable[[bytes], RawGrid]


def extract_sheet_id(url: str) -> str:
    match = _SHEET_ID_RE.search(url)
    if match is None:
        raise InvalidSourceUrl(f"not a spreadsheet URL (no /spreadsheets/d/<id>/ part): {url}")
    return match.group(1)


def extract_gid(url: str) -> str | None:
    """Return the sub-sheet selector (``gid``) from the query or fragment, if any."""
    match = _GID_RE.search(url)
    return match.group(1) if match else None


def build_strategies(url: str) -> list[FetchStrategy]:
    """Build the ordered export attempts for a hosted spreadsheet URL.

    Order:
      1. CSV export of the selected sub-sheet (only when the URL has a gid)
      2. full workbook as .xlsx (first worksheet)
      3. visualization query CSV export (last resort)

    Raises:
        InvalidSourceUrl: no spreadsheet identifier in ``url``
    """
    sheet_id = extract_sheet_id(url)
    gid = extract_gid(url)
    base = f"{SHEETS_BASE}/{sheet_id}"
    strategies: list[FetchStrategy] = []
    if gid is not None:
        strategies.append(
            FetchStrategy("csv-gid", f"{base}/export?format=csv&gid={gid}", read_csv_bytes)
        )
    strategies.append(FetchStrategy("xlsx", f"{base}/export?format=xlsx", read_workbook_bytes))
    gviz = f"{base}/gviz/tq?tqx=out:csv"
    if gid is not None:
        gviz += f"&gid={gid}"
    strategies.append(FetchStrategy("gviz-csv", gviz, read_csv_bytes))
    return strategies


async def _attempt(client: httpx.AsyncClient, strategy: FetchStrategy) -> RawGrid:
    response = await client.get(strategy.url, follow_redirects=True)
    response.raise_for_status()
    return strategy.decode(response.content)


async def fetch_grid(client: httpx.AsyncClient, strategies: list[FetchStrategy]) -> RawGrid:
    """Try each strategy in order and return the first decoded grid.

    Raises:
        SourceUnreachable: every strategy failed
    """
    failures: list[str] = []
    for strategy in strategies:
        try:
            grid = await _attempt(client, strategy)
        except (httpx.HTTPError, RosterImportError) as e:
            logger.debug("fetch attempt %s failed url=%s err=%s", strategy.label, strategy.url, e)
            failures.append(f"{strategy.label}: {e}")
            continue
        logger.debug("fetch attempt %s succeeded rows=%d", strategy.label, len(grid))
        return grid
    raise SourceUnreachable(
        "could not download the spreadsheet (tried: "
        + ", ".join(s.label for s in strategies)
        + ")",
        attempts=failures,
    )


async def resolve_source(
    source: Source,
    client: httpx.AsyncClient | None = None,
    *,
    timeout: float = 30.0,
) -> RawGrid:
    """Turn a source descriptor into a RawGrid.

    URL sources are downloaded with ``client`` (a short-lived client is created
    when none is given); file sources are decoded in place.
    """
    if isinstance(source, FileSource):
        return read_file_source(source.data, source.extension)
    strategies = build_strategies(source.url)
    if client is not None:
        return await fetch_grid(client, strategies)
    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=10.0)) as owned:
        return await fetch_grid(owned, strategies)
