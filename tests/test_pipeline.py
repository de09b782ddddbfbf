"""
Integration tests for the pipeline manager.
"""

import unittest
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newslens.exceptions import AcquisitionError, PersistenceError
from newslens.models import AggregateReport, PhaseProgress, TimeWindow
from newslens.models.database import DatabaseManager
from newslens.pipeline import PipelineManager, ProgressTracker
from tests.factories import make_raw

MEMORY_CONFIG = {'url': 'sqlite://', 'sqlite_fallback': 'sqlite://'}


def raw_batch():
    return [
        make_raw(url='https://example.com/1', published_at='2024-05-01T08:15:00Z',
                 content='Markets rally as markets cheer earnings'),
        make_raw(url='https://example.com/2', published_at='2024-05-01T14:00:00Z',
                 content='Earnings season lifts markets'),
        make_raw(url='https://example.com/3', published_at='2024-05-01T23:59:00Z',
                 source_name=None, content=None),
    ]


class TestPipelineManager(unittest.TestCase):
    """Test full acquire -> normalize -> persist -> aggregate runs."""

    def setUp(self):
        self.scraper = MagicMock()
        self.scraper.search.return_value = raw_batch()
        self.db = DatabaseManager(MEMORY_CONFIG)
        self.pipeline = PipelineManager(self.scraper, self.db)

    def test_run(self):
        tracker = ProgressTracker()

        result = self.pipeline.run('markets', category='business', page_size=3, tracker=tracker)

        self.scraper.search.assert_called_once_with('markets', 3)
        self.assertEqual(len(result.articles), 3)
        self.assertTrue(all(article.id is not None for article in result.articles))
        self.assertEqual(result.category, 'business')

        report = result.report
        self.assertEqual(report.total_articles, 3)
        self.assertEqual(report.source_stats, {'Reuters': 2, 'Unknown': 1})
        self.assertEqual(report.category_stats, {'business': 3})
        self.assertEqual(report.publishing_trends.to_dict(),
                         {'morning': 1, 'afternoon': 1, 'evening': 1, 'night': 0})
        self.assertEqual(report.top_words[0], ('markets', 3))

        stored = self.db.query_by_window(TimeWindow.ALL_TIME)
        self.assertEqual(len(stored), 3)
        self.assertEqual(sorted(a.url for a in stored), [a.url for a in result.articles])

    def test_progress_after_run(self):
        tracker = ProgressTracker()

        result = self.pipeline.run('markets', tracker=tracker)

        word_total = sum(article.word_count for article in result.articles)
        self.assertEqual(tracker.snapshot.processing, PhaseProgress(3, 3))
        self.assertEqual(tracker.snapshot.saving, PhaseProgress(3, 3))
        self.assertEqual(tracker.snapshot.word_count, word_total)
        self.assertEqual(word_total, 10)
        self.assertEqual(result.progress, tracker.snapshot)

    def test_blank_query_is_a_noop(self):
        self.assertIsNone(self.pipeline.run(''))
        self.assertIsNone(self.pipeline.run('   '))
        self.scraper.search.assert_not_called()

    def test_acquisition_error_stores_nothing(self):
        self.scraper.search.side_effect = AcquisitionError('News API error: down')

        with self.assertRaises(AcquisitionError):
            self.pipeline.run('markets')

        self.assertEqual(self.db.query_by_window(TimeWindow.ALL_TIME), [])

    def test_persistence_error_keeps_earlier_inserts(self):
        tracker = ProgressTracker()
        original_insert = self.db.insert_article
        calls = []

        def failing_insert(article):
            calls.append(article.url)
            if len(calls) == 2:
                raise PersistenceError('insert failed')
            return original_insert(article)

        with patch.object(self.db, 'insert_article', side_effect=failing_insert):
            with self.assertRaises(PersistenceError):
                self.pipeline.run('markets', tracker=tracker)

        stored = self.db.query_by_window(TimeWindow.ALL_TIME)
        self.assertEqual([a.url for a in stored], ['https://example.com/1'])
        self.assertEqual(tracker.snapshot.processing, PhaseProgress(3, 3))
        self.assertEqual(tracker.snapshot.saving, PhaseProgress(1, 3))

    def test_analyze_saved(self):
        self.pipeline.run('markets')

        articles, report = self.pipeline.analyze_saved('all')

        self.assertEqual(len(articles), 3)
        self.assertEqual(report.total_articles, 3)
        self.assertEqual(sum(report.source_stats.values()), report.total_articles)

    def test_fetch_trending_runs_sequentially(self):
        report = AggregateReport(top_words=[('markets', 5), ('earnings', 3), ('rally', 2), ('season', 1)])
        seen = []

        results = self.pipeline.fetch_trending(report, count=3, tracker_listener=seen.append)

        queries = [call.args[0] for call in self.scraper.search.call_args_list]
        self.assertEqual(queries, ['markets', 'earnings', 'rally'])
        self.assertEqual([r.query for r in results], ['markets', 'earnings', 'rally'])
        self.assertEqual(len(self.db.query_by_window(TimeWindow.ALL_TIME)), 9)
        # Each run starts from a fresh tracker
        resets = [s for s in seen if s.processing.current == 0 and s.saving.total == 0]
        self.assertEqual(len(resets), 3)

    def test_fetch_trending_without_words(self):
        self.assertEqual(self.pipeline.fetch_trending(AggregateReport()), [])
        self.scraper.search.assert_not_called()


if __name__ == '__main__':
    unittest.main()
