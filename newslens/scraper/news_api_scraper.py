"""
News API client for fetching articles from newsapi.org.
"""

from typing import List, Optional, Any
import time
import requests
from loguru import logger
from newsapi import NewsApiClient
from newsapi.newsapi_exception import NewsAPIException

from newslens.exceptions import AcquisitionError
from newslens.models import RawArticle
from .base_scraper import BaseScraper
from config.settings import NEWS_API_KEY, NEWS_API_CONFIG


class NewsAPIScraper(BaseScraper):
    """Search client for the News API ``everything`` endpoint."""

    def __init__(self, api_key: str = NEWS_API_KEY, client: Optional[Any] = None,
                 language: Optional[str] = None):
        """
        Args:
            api_key: News API key. Required unless ``client`` is given.
            client: Object exposing ``get_everything``; defaults to a NewsApiClient
            language: Optional language filter passed to the feed
        """
        super().__init__("NewsAPI")
        if client is None:
            if not api_key:
                raise ValueError("News API key is required")
            client = NewsApiClient(api_key=api_key)
        self.client = client
        self.language = language if language is not None else NEWS_API_CONFIG.get('language') or None
        self.max_page_size = NEWS_API_CONFIG.get('max_page_size', 100)

    def search(self, query: str, page_size: int = NEWS_API_CONFIG['default_page_size']) -> List[RawArticle]:
        """
        Search News API for articles.

        One request per call, never retried.

        Args:
            query: Search query
            page_size: Number of articles to request (capped at 100)

        Returns:
            Raw articles in feed order

        Raises:
            AcquisitionError: If the feed reports an error or the request fails
        """
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

        page_size = min(self.max_page_size, page_size)
        start_time = time.time()
        logger.info(f"Searching News API for {query!r} (page_size={page_size})")

        params = {'q': query, 'page_size': page_size}
        if self.language:
            params['language'] = self.language

        try:
            response = self.client.get_everything(**params)
        except NewsAPIException as e:
            error_msg = f"News API error: {e.get_message()}"
            logger.error(error_msg)
            raise AcquisitionError(error_msg, code=e.get_code()) from e
        except requests.exceptions.RequestException as e:
            error_msg = f"News API request failed: {e}"
            logger.error(error_msg)
            raise AcquisitionError(error_msg) from e

        articles = self.parse_response(response)

        logger.info(f"Fetched {len(articles)} articles from News API in {time.time() - start_time:.2f}s")
        return articles
