"""
Tests for pipeline progress tracking and time windows.
"""

import unittest
import sys
from datetime import timedelta
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newslens.models import PhaseProgress, ProgressSnapshot, TimeWindow
from newslens.pipeline.progress import ProgressTracker
from newslens.utils.time_utils import cutoff, format_time_of_day
from tests.factories import make_article, utc


class TestProgressTracker(unittest.TestCase):
    """Test two-phase progress accounting."""

    def setUp(self):
        self.tracker = ProgressTracker()
        self.snapshots = []
        self.tracker.subscribe(self.snapshots.append)

    def test_sequential_run(self):
        articles = [make_article(word_count=n) for n in (10, 20, 30)]

        self.tracker.reset(len(articles))
        for article in articles:
            self.tracker.record_processed(article)
        self.tracker.start_saving(len(articles))
        for article in articles:
            self.tracker.record_saved(article)

        final = self.tracker.snapshot
        self.assertEqual(final.processing, PhaseProgress(3, 3))
        self.assertEqual(final.saving, PhaseProgress(3, 3))
        self.assertEqual(final.word_count, 60)

    def test_emits_snapshot_after_every_call(self):
        article = make_article(word_count=5)

        self.tracker.reset(1)
        self.tracker.record_processed(article)
        self.tracker.start_saving(1)
        self.tracker.record_saved(article)

        self.assertEqual(len(self.snapshots), 4)
        self.assertEqual(self.snapshots[0], ProgressSnapshot(processing=PhaseProgress(0, 1)))
        self.assertEqual(self.snapshots[1].processing.current, 1)
        self.assertEqual(self.snapshots[1].word_count, 0)
        self.assertEqual(self.snapshots[-1].word_count, 5)

    def test_counters_are_monotonic(self):
        articles = [make_article(word_count=3) for _ in range(4)]
        self.tracker.reset(4)
        for article in articles:
            self.tracker.record_processed(article)
        self.tracker.start_saving(4)
        for article in articles:
            self.tracker.record_saved(article)

        for previous, current in zip(self.snapshots, self.snapshots[1:]):
            self.assertGreaterEqual(current.processing.current, previous.processing.current)
            self.assertGreaterEqual(current.saving.current, previous.saving.current)
            self.assertGreaterEqual(current.word_count, previous.word_count)

    def test_reset_zeroes_counters(self):
        article = make_article(word_count=7)
        self.tracker.reset(1)
        self.tracker.record_processed(article)
        self.tracker.start_saving(1)
        self.tracker.record_saved(article)

        self.tracker.reset(5)

        self.assertEqual(self.tracker.snapshot, ProgressSnapshot(processing=PhaseProgress(0, 5)))

    def test_overshoot_raises(self):
        article = make_article()
        self.tracker.reset(1)
        self.tracker.record_processed(article)

        with self.assertRaises(ValueError):
            self.tracker.record_processed(article)
        with self.assertRaises(ValueError):
            self.tracker.record_saved(article)

    def test_snapshot_to_dict(self):
        self.tracker.reset(2)

        self.assertEqual(self.tracker.snapshot.to_dict(), {
            'processing': {'current': 0, 'total': 2},
            'saving': {'current': 0, 'total': 0},
            'wordCount': 0,
        })


class TestTimeWindow(unittest.TestCase):
    """Test time-window cutoffs."""

    def setUp(self):
        self.now = utc(2024, 5, 10, 12, 0, 0)

    def test_cutoffs(self):
        self.assertEqual(cutoff(TimeWindow.LAST_24H, self.now), self.now - timedelta(hours=24))
        self.assertEqual(cutoff(TimeWindow.LAST_7D, self.now), self.now - timedelta(days=7))
        self.assertEqual(cutoff(TimeWindow.LAST_30D, self.now), self.now - timedelta(days=30))
        self.assertIsNone(cutoff(TimeWindow.ALL_TIME, self.now))

    def test_string_values(self):
        self.assertEqual(cutoff('7d', self.now), utc(2024, 5, 3, 12, 0, 0))
        self.assertIsNone(cutoff('all', self.now))
        with self.assertRaises(ValueError):
            cutoff('1y', self.now)

    def test_format_time_of_day(self):
        self.assertEqual(format_time_of_day(utc(2024, 1, 1, 7, 5, 9)), '07:05:09+00')


if __name__ == '__main__':
    unittest.main()
