"""Tests for RenderSession lifecycle with a mocked Playwright driver."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from mp_scraper import config
from mp_scraper.renderer import RenderFailure, RenderSession


def _mock_playwright(html: str = "<html></html>"):
    """Build the async_playwright() → driver → browser → context → page chain."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.content = AsyncMock(return_value=html)

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    driver = MagicMock()
    driver.chromium.launch = AsyncMock(return_value=browser)
    driver.stop = AsyncMock()

    factory = MagicMock()
    factory.return_value.start = AsyncMock(return_value=driver)
    return factory, driver, browser, context, page


def _assert_torn_down(driver, browser, context):
    context.close.assert_awaited_once()
    browser.close.assert_awaited_once()
    driver.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_render_waits_for_network_idle_and_returns_markup():
    factory, driver, browser, context, page = _mock_playwright("<html>ok</html>")

    with patch("mp_scraper.renderer.async_playwright", factory):
        async with RenderSession(headless=True, user_agent="UA/1.0", timeout_ms=1234) as session:
            html = await session.render("https://example.cl/bid")

    assert html == "<html>ok</html>"
    page.goto.assert_awaited_once_with("https://example.cl/bid", wait_until="networkidle", timeout=1234)
    driver.chromium.launch.assert_awaited_once_with(headless=True, args=config.BROWSER_ARGS)
    browser.new_context.assert_awaited_once_with(user_agent="UA/1.0")
    _assert_torn_down(driver, browser, context)


@pytest.mark.asyncio
async def test_default_user_agent_is_a_desktop_browser():
    factory, _, browser, _, _ = _mock_playwright()

    with patch("mp_scraper.renderer.async_playwright", factory):
        async with RenderSession():
            pass

    user_agent = browser.new_context.await_args.kwargs["user_agent"]
    assert user_agent.startswith("Mozilla/5.0")
    assert "Chrome/" in user_agent


@pytest.mark.asyncio
async def test_navigation_error_becomes_render_failure_and_browser_closes():
    factory, driver, browser, context, page = _mock_playwright()
    cause = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
    page.goto.side_effect = cause

    with patch("mp_scraper.renderer.async_playwright", factory):
        with pytest.raises(RenderFailure) as excinfo:
            async with RenderSession() as session:
                await session.render("https://nope.invalid/")

    assert excinfo.value.url == "https://nope.invalid/"
    assert excinfo.value.cause is cause
    _assert_torn_down(driver, browser, context)


@pytest.mark.asyncio
async def test_launch_failure_becomes_render_failure_and_driver_stops():
    factory, driver, browser, context, _ = _mock_playwright()
    driver.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")

    with patch("mp_scraper.renderer.async_playwright", factory):
        with pytest.raises(RenderFailure):
            async with RenderSession():
                pass

    driver.stop.assert_awaited_once()
    browser.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_error_in_caller_still_closes_browser():
    factory, driver, browser, context, _ = _mock_playwright()

    with patch("mp_scraper.renderer.async_playwright", factory):
        with pytest.raises(ValueError):
            async with RenderSession() as session:
                await session.render("https://example.cl/bid")
                raise ValueError("extraction bug")

    _assert_torn_down(driver, browser, context)


@pytest.mark.asyncio
async def test_teardown_failure_is_logged_not_raised(caplog):
    factory, driver, browser, context, _ = _mock_playwright()
    browser.close.side_effect = RuntimeError("browser already gone")

    with patch("mp_scraper.renderer.async_playwright", factory):
        with caplog.at_level(logging.WARNING, logger="mp_scraper.renderer"):
            async with RenderSession() as session:
                html = await session.render("https://example.cl/bid")

    assert html == "<html></html>"
    driver.stop.assert_awaited_once()
    assert "Could not close browser" in caplog.text


@pytest.mark.asyncio
async def test_render_requires_open_session():
    with pytest.raises(RuntimeError):
        await RenderSession().render("https://example.cl/bid")
