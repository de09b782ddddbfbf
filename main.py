#!/usr/bin/env python3
"""
NewsLens - Main application entry point.

A news analytics tool that:
- Searches News API for articles matching a query
- Normalizes them and builds per-article word-frequency tables
- Stores them in a database
- Reports source, category, publishing-time and word statistics
"""

import argparse
import sys
from typing import Dict, List, Optional

from loguru import logger

from newslens.analyzer.aggregator import aggregate
from newslens.analyzer.projector import project
from newslens.exceptions import NewsLensError
from newslens.models import AggregateReport, ChartSeries, PipelineResult, ProgressSnapshot, TimeWindow
from newslens.models.database import get_db_manager
from newslens.pipeline import PipelineManager, ProgressTracker
from newslens.pipeline.progress import log_progress
from newslens.scraper import NewsAPIScraper
from newslens.utils.data_utils import export_articles, export_report
from newslens.utils.logger import setup_logging
from config.settings import NEWS_API_CONFIG, PIPELINE_CONFIG


def print_progress(snapshot: ProgressSnapshot) -> None:
    """Single-line progress display for the terminal."""
    processing, saving = snapshot.processing, snapshot.saving
    sys.stderr.write(
        f"\rProcessing {processing.current}/{processing.total}  "
        f"Saving {saving.current}/{saving.total}  "
        f"Words {snapshot.word_count:,}"
    )
    if saving.total and saving.current == saving.total:
        sys.stderr.write("\n")
    sys.stderr.flush()


def print_report(report: AggregateReport, charts: Dict[str, ChartSeries]) -> None:
    """Print a report and its chart series."""
    print("\n=== Analytics ===")
    print(f"Total articles: {report.total_articles}")
    average = report.average_word_count if report.average_word_count is not None else 'n/a'
    print(f"Average word count: {average}")

    trends = report.publishing_trends
    print("\nPublishing distribution:")
    print(f"  Morning (6-12): {trends.morning}")
    print(f"  Afternoon (12-18): {trends.afternoon}")
    print(f"  Evening (18-24): {trends.evening}")
    print(f"  Night (0-6): {trends.night}")

    if report.category_stats:
        print("\nCategories:")
        for category, count in report.category_stats.items():
            print(f"  {category}: {count}")

    for name in ('sources', 'words'):
        chart = charts[name]
        print(f"\n{chart.datasets[0].label}:")
        for label, value in zip(chart.labels, chart.datasets[0].data):
            print(f"  {label}: {value}")


class NewsLens:
    """Main NewsLens application class."""

    def __init__(self, show_progress: bool = True):
        """Initialize NewsLens application."""
        logger.info("Initializing NewsLens...")

        self.db = get_db_manager()
        self._scraper: Optional[NewsAPIScraper] = None
        self.show_progress = show_progress

        logger.info("NewsLens initialized successfully")

    @property
    def pipeline(self) -> PipelineManager:
        # The feed client needs an API key, so it is only created for commands that search
        if self._scraper is None:
            self._scraper = NewsAPIScraper()
        return PipelineManager(self._scraper, self.db, tracker_factory=self._new_tracker)

    def _new_tracker(self) -> ProgressTracker:
        tracker = ProgressTracker()
        tracker.subscribe(log_progress)
        if self.show_progress:
            tracker.subscribe(print_progress)
        return tracker

    def search(self,
               query: str,
               category: Optional[str] = None,
               page_size: int = NEWS_API_CONFIG['default_page_size'],
               export_format: Optional[str] = None) -> Optional[PipelineResult]:
        """
        Search, store and analyze articles for a query.

        Args:
            query: Search query
            category: Category assigned to the fetched articles
            page_size: Number of articles to fetch
            export_format: Export format ('json', 'csv', 'excel')

        Returns:
            PipelineResult, or None for an empty query
        """
        result = self.pipeline.run(query, category=category, page_size=page_size)
        if result is None:
            return None

        charts = project(result.report)
        print_report(result.report, charts)

        if export_format:
            export_path = export_articles(result.articles, format=export_format)
            report_path = export_report(result.report, charts)
            logger.info(f"Results exported to: {export_path}, {report_path}")

        return result

    def saved(self,
              window: str = PIPELINE_CONFIG['default_window'],
              export_format: Optional[str] = None) -> AggregateReport:
        """
        Analyze stored articles within a time window.

        Args:
            window: Time window ('24h', '7d', '30d', 'all')
            export_format: Export format for the articles

        Returns:
            Report over the stored articles
        """
        articles = self.db.query_by_window(TimeWindow.from_value(window))
        logger.info(f"Found {len(articles)} saved articles in window {window}")

        report = aggregate(articles)
        charts = project(report)
        print_report(report, charts)

        if export_format and articles:
            export_path = export_articles(articles, format=export_format)
            report_path = export_report(report, charts)
            logger.info(f"Results exported to: {export_path}, {report_path}")

        return report

    def trending(self,
                 window: str = PIPELINE_CONFIG['default_window'],
                 count: int = PIPELINE_CONFIG['trending_queries'],
                 category: Optional[str] = None,
                 page_size: int = NEWS_API_CONFIG['default_page_size']) -> List[PipelineResult]:
        """
        Fetch related articles for the top words of the stored articles.

        Args:
            window: Time window of the stored articles to rank words from
            count: Number of top words to search for
            category: Category assigned to the fetched articles
            page_size: Number of articles per query

        Returns:
            One PipelineResult per query
        """
        pipeline = self.pipeline
        _, report = pipeline.analyze_saved(window)
        results = pipeline.fetch_trending(report, count=count, category=category, page_size=page_size)

        for result in results:
            print(f"✓ {result.query}: {len(result.articles)} articles, "
                  f"{result.progress.word_count:,} words")
        return results

    def get_stats(self) -> dict:
        """Get system statistics."""
        return {
            'database': {**self.db.get_stats(), 'connection_info': self.db.get_database_info()},
        }


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    windows = [w.value for w in TimeWindow]

    parser = argparse.ArgumentParser(
        description="NewsLens - News search and analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py search --query "climate" --category science --page-size 50
  python main.py saved --window 7d --export json
  python main.py trending --window 24h --count 3
  python main.py stats
        """
    )
    parser.add_argument('--log-level', help='Override the configured log level')
    parser.add_argument('--quiet', action='store_true', help='Hide the progress display')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Search and store
    search_parser = subparsers.add_parser('search', help='Search, store and analyze articles')
    search_parser.add_argument('--query', required=True, help='Search query')
    search_parser.add_argument('--category', help='Category to assign to fetched articles')
    search_parser.add_argument('--page-size', type=int, default=NEWS_API_CONFIG['default_page_size'],
                               choices=[10, 20, 50, 100], help='Number of articles to fetch')
    search_parser.add_argument('--export', choices=['json', 'csv', 'excel'], help='Export format')

    # Analyze saved articles
    saved_parser = subparsers.add_parser('saved', help='Analyze saved articles')
    saved_parser.add_argument('--window', default=PIPELINE_CONFIG['default_window'], choices=windows,
                              help='Time window')
    saved_parser.add_argument('--export', choices=['json', 'csv', 'excel'], help='Export format')

    # Fetch related articles
    trending_parser = subparsers.add_parser('trending', help='Fetch articles for the top saved words')
    trending_parser.add_argument('--window', default=PIPELINE_CONFIG['default_window'], choices=windows,
                                 help='Time window of saved articles')
    trending_parser.add_argument('--count', type=int, default=PIPELINE_CONFIG['trending_queries'],
                                 help='Number of top words to search for')
    trending_parser.add_argument('--category', help='Category to assign to fetched articles')
    trending_parser.add_argument('--page-size', type=int, default=NEWS_API_CONFIG['default_page_size'],
                                 choices=[10, 20, 50, 100], help='Number of articles per query')

    # Get statistics
    subparsers.add_parser('stats', help='Show database statistics')

    return parser


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    try:
        app = NewsLens(show_progress=not args.quiet)

        if args.command == 'search':
            app.search(
                query=args.query,
                category=args.category,
                page_size=args.page_size,
                export_format=args.export
            )

        elif args.command == 'saved':
            app.saved(window=args.window, export_format=args.export)

        elif args.command == 'trending':
            app.trending(
                window=args.window,
                count=args.count,
                category=args.category,
                page_size=args.page_size
            )

        elif args.command == 'stats':
            stats = app.get_stats()
            db_stats = stats['database']
            connection_info = db_stats.get('connection_info', {})

            print("\n=== System Statistics ===")
            print(f"\nDatabase:")
            print(f"  Type: {connection_info.get('type', 'unknown')}")
            if connection_info.get('pool_size'):
                print(f"  Pool size: {connection_info.get('pool_size')}")
                print(f"  Active connections: {connection_info.get('checked_out', 0)}")
            print(f"  Total articles: {db_stats.get('total_articles', 0)}")
            print(f"  Word frequency entries: {db_stats.get('total_word_frequencies', 0)}")
            print(f"  Sources: {db_stats.get('source_count', 0)}")

            category_dist = db_stats.get('category_distribution', {})
            if category_dist:
                print(f"  Category distribution:")
                for category, count in category_dist.items():
                    print(f"    {category}: {count}")

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
    except (NewsLensError, ValueError) as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
