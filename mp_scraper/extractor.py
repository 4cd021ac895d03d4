"""
extractor.py — Attachment extraction from rendered Mercado Público markup.

Two grids can list a bid's attachments:

  Primary   — the `grvAnexos` grid on the bid page. Each row has the file name
              in its first cell and an image button whose onclick calls
              fn_descargar_anexo_v2('<idDoc>'). The download URL is rebuilt
              from the bid id in the page URL and that document id.
  Secondary — the `grdArchivos` grid on the dedicated ViewAttachment.aspx
              page, linked from the bid page. Name in column 0, a plain
              <a href> in column 2.

Both passes share one `seen` set of download URLs so the merged result never
repeats a URL; the first occurrence (primary first) wins.
"""

import logging
from dataclasses import dataclass
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from mp_scraper import config
from mp_scraper import locators as sel

logger = logging.getLogger("mp_scraper.extractor")


@dataclass(frozen=True)
class AttachmentRecord:
    name: str
    download_url: str

    def to_dict(self) -> dict:
        """Wire format returned by the HTTP service."""
        return {"nombre": self.name, "url_descarga": self.download_url}


def _grid_rows(soup: BeautifulSoup, token: str) -> list[Tag]:
    """Body rows of every table whose id contains `token`, in document order."""
    # Browser-serialized markup always has <tbody>; the bare `> tr` branch
    # covers hand-written markup parsed without one.
    selector = f'table[id*="{token}"] > tbody > tr, table[id*="{token}"] > tr'
    return soup.select(selector)


def _cells(row: Tag) -> list[Tag]:
    return row.find_all("td", recursive=False)


def _bid_id(source_url: str) -> str | None:
    values = parse_qs(urlparse(source_url).query).get(sel.BID_ID_PARAM)
    return values[0] if values else None


def resolve_href(base_url: str, href: str) -> str | None:
    """Absolute form of `href`, or None if it cannot be parsed as a URL."""
    # Browsers trim the attribute and percent-encode spaces before resolving
    href = href.strip().replace(" ", "%20")
    try:
        return urljoin(base_url, href)
    except ValueError as e:
        logger.warning("Unparseable link %r on %s: %s", href, base_url, e)
        return None


def build_download_url(bid_id: str, doc_id: str) -> str:
    return f"{config.PLATFORM_BASE_URL}{sel.DOWNLOAD_DOC_PATH}?idlic={bid_id}&idDoc={doc_id}"


def parse_document_id(onclick: str | None) -> str | None:
    """Return the numeric document id from a download button's onclick, if any."""
    if not onclick:
        return None
    match = sel.DOWNLOAD_HANDLER_PATTERN.search(onclick)
    return match.group(1) if match else None


def _append(records: list[AttachmentRecord], seen: set[str], name: str, url: str) -> None:
    if url in seen:
        logger.debug("Duplicate attachment skipped: %s", url)
        return
    seen.add(url)
    records.append(AttachmentRecord(name=name, download_url=url))


# ═══════════════════════════════════════════════════════════════
# PRIMARY GRID — bid page
# ═══════════════════════════════════════════════════════════════

def extract_primary(
    markup: str, source_url: str, seen: set[str] | None = None
) -> tuple[list[AttachmentRecord], str | None]:
    """
    Extract attachments from the bid page grid.

    Returns:
        (records, secondary_page_url) — secondary_page_url is the absolute
        URL of the dedicated attachments page, or None if the bid has none.
    """
    if seen is None:
        seen = set()

    soup = BeautifulSoup(markup, "html.parser")
    records: list[AttachmentRecord] = []

    rows = _grid_rows(soup, sel.PRIMARY_TABLE_TOKEN)
    bid_id = _bid_id(source_url)
    if not rows:
        logger.debug("No %s grid on %s", sel.PRIMARY_TABLE_TOKEN, source_url)
    elif bid_id is None:
        logger.warning(
            "Source URL has no '%s' parameter — cannot build download URLs for %d row(s): %s",
            sel.BID_ID_PARAM, len(rows), source_url,
        )
    else:
        for row_idx, row in enumerate(rows):
            cells = _cells(row)
            if not cells:
                continue  # header row (<th> only)

            name = cells[0].get_text().strip()
            if not name:
                continue

            button = row.find("input", attrs={"type": "image"})
            doc_id = parse_document_id(button.get("onclick") if button else None)
            if doc_id is None:
                logger.debug("Row %d ('%s'): no downloadable document", row_idx, name)
                continue

            _append(records, seen, name, build_download_url(bid_id, doc_id))

    secondary_url = None
    link = soup.select_one(f'a[href*="{sel.SECONDARY_PAGE_MARKER}"]')
    if link is not None:
        secondary_url = resolve_href(source_url, link["href"])

    logger.info("Primary grid: %d attachment(s)%s", len(records),
                " + dedicated attachments page" if secondary_url else "")
    return records, secondary_url


# ═══════════════════════════════════════════════════════════════
# SECONDARY GRID — dedicated attachments page
# ═══════════════════════════════════════════════════════════════

def extract_secondary(
    markup: str, source_url: str, seen: set[str] | None = None
) -> list[AttachmentRecord]:
    """Extract attachments from the ViewAttachment.aspx grid. Links resolve against `source_url`."""
    if seen is None:
        seen = set()

    soup = BeautifulSoup(markup, "html.parser")
    records: list[AttachmentRecord] = []

    for row_idx, row in enumerate(_grid_rows(soup, sel.SECONDARY_TABLE_TOKEN)):
        cells = _cells(row)
        if len(cells) <= sel.COL_SECONDARY_NAME:
            continue

        name = cells[sel.COL_SECONDARY_NAME].get_text().strip()
        if not name:
            continue

        link = None
        if len(cells) > sel.COL_SECONDARY_LINK:
            link = cells[sel.COL_SECONDARY_LINK].find("a", href=True)
        if link is None:
            logger.debug("Row %d ('%s'): no download link", row_idx, name)
            continue

        url = resolve_href(source_url, link["href"])
        if url is None:
            continue

        _append(records, seen, name, url)

    logger.info("Secondary grid: %d new attachment(s)", len(records))
    return records
