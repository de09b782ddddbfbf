"""
Search feed clients for NewsLens.
"""

from .base_scraper import BaseScraper
from .news_api_scraper import NewsAPIScraper

__all__ = [
    'BaseScraper',
    'NewsAPIScraper'
]
