"""
Remote data access for the BJIFF calendar exporter.

This package contains:
- HttpClient: aiohttp session wrapper returning decoded JSON
- MaoyanScraper: catalog and per-movie showtime fetchers for the festival API
"""

from bjiff_calendar.scraper.http_client import HttpClient
from bjiff_calendar.scraper.maoyan_scraper import MaoyanScraper

__all__ = ["HttpClient", "MaoyanScraper"]
