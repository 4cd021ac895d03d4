"""Shared pytest fixtures: pinned platform host and a browser-free render session."""

import pytest

from mp_scraper import config


@pytest.fixture(autouse=True)
def production_platform(monkeypatch):
    """Pin the download host regardless of any local .env."""
    monkeypatch.setattr(config, "PLATFORM_BASE_URL", "https://www.mercadopublico.cl")


class FakeSession:
    """Stands in for RenderSession: serves canned markup (or raises) per URL."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.rendered: list[str] = []
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def render(self, url: str) -> str:
        self.rendered.append(url)
        result = self.pages.get(url, "<html></html>")
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_sessions():
    """
    Returns `make(pages) -> factory`. Every session the factory creates is
    appended to `make.sessions` so tests can assert on teardown.
    """
    sessions: list[FakeSession] = []

    def make(pages: dict):
        def factory():
            session = FakeSession(pages)
            sessions.append(session)
            return session
        return factory

    make.sessions = sessions
    return make
