"""
Pipeline manager: acquisition, normalization, persistence and aggregation.
"""

from typing import Callable, List, Optional, Tuple, Union
import time
from loguru import logger

from newslens.analyzer.aggregator import aggregate
from newslens.analyzer.normalizer import normalize_articles
from newslens.models import AggregateReport, NormalizedArticle, PipelineResult, TimeWindow
from newslens.models.database import DatabaseManager
from newslens.scraper.base_scraper import BaseScraper
from .progress import ProgressTracker
from config.settings import NEWS_API_CONFIG, PIPELINE_CONFIG


class PipelineManager:
    """
    Coordinates one pipeline run at a time.

    Runs are strictly sequential: each article (and its word frequencies)
    is stored before the next one starts, and the trending workflow
    finishes one full run before starting another. Callers must not start
    overlapping runs.
    """

    def __init__(self,
                 scraper: BaseScraper,
                 db: DatabaseManager,
                 tracker_factory: Callable[[], ProgressTracker] = ProgressTracker):
        """
        Args:
            scraper: Search feed client
            db: Article store
            tracker_factory: Creates the progress tracker of each run
        """
        self.scraper = scraper
        self.db = db
        self.tracker_factory = tracker_factory

    def run(self,
            query: str,
            category: Optional[str] = None,
            page_size: int = NEWS_API_CONFIG['default_page_size'],
            tracker: Optional[ProgressTracker] = None) -> Optional[PipelineResult]:
        """
        Fetch, normalize, store and aggregate the articles for a query.

        Args:
            query: Search query. A blank query is a no-op.
            category: Category assigned to every article of the batch
            page_size: Number of articles to request
            tracker: Progress tracker for this run. A new one is created if None.

        Returns:
            PipelineResult, or None when the query is blank

        Raises:
            AcquisitionError: If the feed fails; nothing is stored
            PersistenceError: If an insert fails; earlier inserts stay stored
        """
        if not query or not query.strip():
            logger.info("Empty query, nothing to fetch")
            return None

        start_time = time.time()
        tracker = tracker or self.tracker_factory()

        # Step 1: Acquire
        logger.info(f"Step 1: Fetching articles for {query!r}...")
        raw_articles = self.scraper.search(query, page_size)

        # Step 2: Normalize
        logger.info(f"Step 2: Processing {len(raw_articles)} articles...")
        tracker.reset(len(raw_articles))
        articles = normalize_articles(raw_articles, category, tracker)

        # Step 3: Persist
        logger.info(f"Step 3: Saving {len(articles)} articles to database...")
        saved = self.save_articles(articles, tracker)

        # Step 4: Aggregate the fresh batch
        report = aggregate(saved)

        processing_time = time.time() - start_time
        snapshot = tracker.snapshot
        logger.info(
            f"Pipeline completed in {processing_time:.2f}s: {len(saved)} articles, "
            f"{snapshot.word_count:,} words"
        )

        return PipelineResult(
            query=query,
            category=category or None,
            articles=saved,
            report=report,
            progress=snapshot,
            processing_time=processing_time
        )

    def save_articles(self, articles: List[NormalizedArticle],
                      tracker: ProgressTracker) -> List[NormalizedArticle]:
        """Store articles one at a time, in order. Returns them with their ids."""
        tracker.start_saving(len(articles))
        saved = []
        for article in articles:
            article_id = self.db.insert_article(article)
            self.db.insert_word_frequencies(article_id, article.word_frequencies)
            stored = article.with_id(article_id)
            saved.append(stored)
            tracker.record_saved(stored)
        return saved

    def analyze_saved(self,
                      window: Union[TimeWindow, str] = PIPELINE_CONFIG['default_window']
                      ) -> Tuple[List[NormalizedArticle], AggregateReport]:
        """Load stored articles for a time window and aggregate them."""
        window = TimeWindow.from_value(window)
        articles = self.db.query_by_window(window)
        logger.info(f"Loaded {len(articles)} saved articles for window {window.value}")
        return articles, aggregate(articles)

    def fetch_trending(self,
                       report: AggregateReport,
                       count: int = PIPELINE_CONFIG['trending_queries'],
                       category: Optional[str] = None,
                       page_size: int = NEWS_API_CONFIG['default_page_size'],
                       tracker_listener: Optional[Callable] = None) -> List[PipelineResult]:
        """
        Re-run the pipeline once for each of the report's top words.

        Runs are sequential; a failing run stops the workflow and its
        error propagates.

        Args:
            report: Report whose top words become queries
            count: Number of top words to use
            category: Category for the fetched articles
            page_size: Number of articles per query
            tracker_listener: Optional listener subscribed to each run's tracker

        Returns:
            One PipelineResult per query, in top-word order
        """
        queries = [word for word, _ in report.top_words[:count]]
        if not queries:
            logger.warning("No top words available, nothing to fetch")
            return []

        logger.info(f"Fetching related articles for: {', '.join(queries)}")
        results = []
        for query in queries:
            tracker = self.tracker_factory()
            if tracker_listener is not None:
                tracker.subscribe(tracker_listener)
            results.append(self.run(query, category=category, page_size=page_size, tracker=tracker))
        return results
