"""Mercado Público bid attachment scraper (headless browser + HTTP service)."""
