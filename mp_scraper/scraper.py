"""
scraper.py — Two-phase attachment scraping for a Mercado Público bid.

Phase 1: Render the bid page, read its attachment grid and look for a link to
         the dedicated attachments page.
Phase 2: If that link exists, render the dedicated page in the same browser
         and merge its grid into the result, skipping URLs already seen.

A render failure in either phase degrades to "no attachments" (empty list);
anything else propagates to the caller.
"""

import logging
from typing import Callable

from mp_scraper.extractor import AttachmentRecord, extract_primary, extract_secondary
from mp_scraper.renderer import RenderFailure, RenderSession

logger = logging.getLogger("mp_scraper.scraper")


async def scrape_attachments(
    url: str, session_factory: Callable[[], RenderSession] = RenderSession
) -> list[AttachmentRecord]:
    """
    Full two-phase scrape. Returns attachments in discovery order:
    bid page rows first, then new rows from the dedicated page.
    """
    seen: set[str] = set()

    try:
        async with session_factory() as session:
            # Phase 1: bid page
            html = await session.render(url)
            records, secondary_url = extract_primary(html, url, seen)

            # Phase 2: dedicated attachments page
            if secondary_url:
                logger.info("Navigating to dedicated attachments page: %s", secondary_url)
                secondary_html = await session.render(secondary_url)
                records.extend(extract_secondary(secondary_html, secondary_url, seen))
    except RenderFailure as e:
        logger.error("Scrape failed for %s: %s", url, e, exc_info=e.cause)
        return []

    logger.info("Found %d attachment(s) in total for %s", len(records), url)
    return records


async def warm_browser(session_factory: Callable[[], RenderSession] = RenderSession) -> None:
    """Launch and close the browser once to verify the Chromium build is installed."""
    logger.info("Launching browser to verify the Playwright installation...")
    async with session_factory():
        pass
    logger.info("Browser launched and closed successfully")
