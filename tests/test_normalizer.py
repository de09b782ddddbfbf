"""
Tests for tokenization and article normalization.
"""

import unittest
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newslens.analyzer.normalizer import normalize, normalize_articles
from newslens.models import RawArticle, WordFrequencyEntry
from newslens.pipeline.progress import ProgressTracker
from newslens.utils.text_utils import tokenize, count_words
from tests.factories import make_raw, utc


class TestTokenize(unittest.TestCase):
    """Test word-frequency tables."""

    def test_short_words_are_dropped(self):
        """Test the length cutoff and case folding."""
        entries = tokenize("The Quick quick FOX fox jumps")

        self.assertEqual(entries, [WordFrequencyEntry('quick', 2), WordFrequencyEntry('jumps', 1)])

    def test_punctuation_is_stripped(self):
        entries = tokenize("Breaking: markets rally; markets fall.")

        self.assertEqual(
            [(e.word, e.frequency) for e in entries],
            [('markets', 2), ('breaking', 1), ('rally', 1), ('fall', 1)]
        )

    def test_ties_keep_first_seen_order(self):
        entries = tokenize("delta alpha delta alpha gamma")

        self.assertEqual([e.word for e in entries], ['delta', 'alpha', 'gamma'])

    def test_keeps_top_ten(self):
        words = [f"word{chr(ord('a') + i)}" for i in range(12)]
        text = ' '.join(words) + ' ' + words[11]

        entries = tokenize(text)

        self.assertEqual(len(entries), 10)
        self.assertEqual(entries[0], WordFrequencyEntry(words[11], 2))
        self.assertEqual([e.word for e in entries[1:]], words[:9])

    def test_empty_text(self):
        self.assertEqual(tokenize(None), [])
        self.assertEqual(tokenize(''), [])
        self.assertEqual(tokenize('a an the'), [])

    def test_count_words(self):
        self.assertEqual(count_words('one  two\nthree\tfour'), 4)
        self.assertEqual(count_words(None), 0)
        self.assertEqual(count_words('   '), 0)


class TestNormalize(unittest.TestCase):
    """Test mapping raw feed articles to canonical records."""

    def test_defaults_for_missing_fields(self):
        raw = RawArticle(url='https://example.com/x', published_at='2024-05-01T14:30:05Z')

        article = normalize(raw)

        self.assertEqual(article.title, '')
        self.assertEqual(article.description, '')
        self.assertEqual(article.source_name, 'Unknown')
        self.assertIsNone(article.author)
        self.assertIsNone(article.category)
        self.assertEqual(article.content, '')
        self.assertEqual(article.word_count, 0)
        self.assertEqual(article.word_frequencies, ())
        self.assertIsNone(article.id)

    def test_fields_and_word_count(self):
        article = normalize(make_raw(), category='business')

        self.assertEqual(article.title, 'Markets rally')
        self.assertEqual(article.source_name, 'Reuters')
        self.assertEqual(article.author, 'Jane Doe')
        self.assertEqual(article.category, 'business')
        self.assertEqual(article.word_count, 6)
        self.assertEqual(article.word_frequencies[0].word, 'markets')

    def test_timestamp_keeps_time_of_day(self):
        article = normalize(make_raw(published_at='2024-05-01T14:30:05Z'))

        self.assertEqual(article.published_at, '14:30:05+00')
        self.assertEqual(article.published_datetime, utc(2024, 5, 1, 14, 30, 5))

    def test_timestamp_with_offset_is_converted_to_utc(self):
        article = normalize(make_raw(published_at='2024-05-01T01:15:00+02:00'))

        self.assertEqual(article.published_at, '23:15:00+00')
        self.assertEqual(article.published_datetime, utc(2024, 4, 30, 23, 15))

    def test_unparseable_timestamp(self):
        for value in (None, '', 'garbage'):
            article = normalize(make_raw(published_at=value))
            self.assertEqual(article.published_at, '')
            self.assertIsNone(article.published_datetime)

    def test_out_of_range_timestamp(self):
        for value in ('0001-01-01T00:30:00+01:00', '9999-12-31T23:30:00-01:00'):
            article = normalize(make_raw(published_at=value))
            self.assertEqual(article.published_at, '')
            self.assertIsNone(article.published_datetime)

    def test_empty_category_is_none(self):
        self.assertIsNone(normalize(make_raw(), category='').category)

    def test_normalize_articles_reports_progress(self):
        tracker = ProgressTracker()
        tracker.reset(2)
        raws = [make_raw(url='https://example.com/1'), make_raw(url='https://example.com/2')]

        articles = normalize_articles(raws, 'tech', tracker)

        self.assertEqual([a.url for a in articles], ['https://example.com/1', 'https://example.com/2'])
        self.assertEqual(tracker.snapshot.processing.current, 2)
        self.assertEqual(tracker.snapshot.word_count, 0)


class TestRawArticle(unittest.TestCase):
    """Test parsing feed JSON into RawArticle."""

    def test_from_api(self):
        raw = RawArticle.from_api({
            'title': 'Title',
            'description': None,
            'source': {'id': None, 'name': 'BBC News'},
            'author': 42,
            'url': 'https://example.com',
            'publishedAt': '2024-05-01T14:30:05Z',
            'content': 'Body'
        })

        self.assertEqual(raw.title, 'Title')
        self.assertIsNone(raw.description)
        self.assertEqual(raw.source_name, 'BBC News')
        self.assertIsNone(raw.author)
        self.assertEqual(raw.published_at, '2024-05-01T14:30:05Z')

    def test_missing_source(self):
        self.assertIsNone(RawArticle.from_api({'title': 'x'}).source_name)
        self.assertIsNone(RawArticle.from_api({'source': 'BBC'}).source_name)

    def test_rejects_non_objects(self):
        with self.assertRaises(TypeError):
            RawArticle.from_api(['not', 'an', 'article'])


if __name__ == '__main__':
    unittest.main()
