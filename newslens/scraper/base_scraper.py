"""
Base class for news search feed clients.
"""

from abc import ABC, abstractmethod
from typing import Any, List
from loguru import logger

from newslens.exceptions import AcquisitionError
from newslens.models import RawArticle


class BaseScraper(ABC):
    """Abstract base class for search feed clients."""

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    def search(self, query: str, page_size: int) -> List[RawArticle]:
        """
        Fetch articles matching a query.

        Args:
            query: Non-empty search query
            page_size: Number of articles to request

        Returns:
            Raw articles in feed order

        Raises:
            AcquisitionError: If the feed reports an error or cannot be reached
        """
        pass

    def parse_response(self, response: Any) -> List[RawArticle]:
        """
        Validate a feed response and parse its articles.

        A response is successful only if its status is not 'error' and it
        carries an ``articles`` list. Entries that are not JSON objects are
        skipped.

        Raises:
            AcquisitionError: For an error status or a malformed response
        """
        if not isinstance(response, dict):
            raise AcquisitionError(f"{self.source_name} returned a malformed response")

        if response.get('status') == 'error':
            raise AcquisitionError(
                f"{self.source_name} error: {response.get('message', 'Unknown error')}",
                code=response.get('code')
            )

        entries = response.get('articles')
        if not isinstance(entries, list):
            raise AcquisitionError(f"{self.source_name} response has no articles list")

        articles = []
        for index, entry in enumerate(entries):
            try:
                articles.append(RawArticle.from_api(entry))
            except TypeError as e:
                logger.warning(f"Skipping {self.source_name} article #{index}: {e}")

        return articles
