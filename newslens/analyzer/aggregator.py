"""
Aggregation of canonical articles into an analytics report.
"""

import math
import re
from typing import Dict, Iterable, List, Optional
from loguru import logger

from newslens.models import AggregateReport, NormalizedArticle, PublishingTrends, WordCountPoint

TOP_WORDS_LIMIT = 10

_HOUR_PREFIX = re.compile(r'^(\d{2}):')
# Zone designator, only when it follows an HH:MM[:SS[.ffffff]] time
_ZONE_SUFFIX = re.compile(r'(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)(?:Z|[+-]\d{2}(?::?\d{2})?)$')


def parse_hour(published_at: Optional[str]) -> Optional[int]:
    """Read the two-digit hour prefix of a stored time; None if absent or out of range."""
    if not published_at:
        return None
    match = _HOUR_PREFIX.match(published_at)
    if not match:
        return None
    hour = int(match.group(1))
    if hour > 23:
        return None
    return hour


def strip_zone_suffix(published_at: Optional[str]) -> str:
    """'14:00:00+00' -> '14:00:00'"""
    if not published_at:
        return ''
    return _ZONE_SUFFIX.sub(r'\1', published_at)


def bucket_for_hour(hour: int) -> str:
    """
    Classify an hour of the day into a publishing bucket.

    Args:
        hour: Hour in [0, 23]

    Returns:
        'morning' [6,12), 'afternoon' [12,18), 'evening' [18,24) or 'night' [0,6)
    """
    if 6 <= hour < 12:
        return 'morning'
    if 12 <= hour < 18:
        return 'afternoon'
    if 18 <= hour < 24:
        return 'evening'
    return 'night'


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_words(accumulator: Dict[str, int], limit: int = TOP_WORDS_LIMIT) -> List[tuple]:
    """Top ``limit`` words by summed frequency; ties keep first-seen order."""
    ranked = sorted(accumulator.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def aggregate(articles: Iterable[NormalizedArticle]) -> AggregateReport:
    """
    Reduce a collection of articles into an AggregateReport.

    The input is not modified. Articles are processed in ascending
    ``published_at`` order (stable), which fixes the order of the
    word-count trend and the first-seen order of sources and words.
    An article whose time has no parseable hour is left out of the
    publishing buckets only.

    Args:
        articles: Normalized articles, typically from the store or a fresh batch

    Returns:
        AggregateReport over all articles
    """
    working = sorted(articles, key=lambda article: article.published_at or '')
    report = AggregateReport(total_articles=len(working))

    if not working:
        return report

    trends = PublishingTrends()
    top_words: Dict[str, int] = {}
    total_words = 0
    unparsed = 0

    for article in working:
        report.source_stats[article.source_name] = report.source_stats.get(article.source_name, 0) + 1

        if article.category:
            report.category_stats[article.category] = report.category_stats.get(article.category, 0) + 1

        for entry in article.word_frequencies:
            top_words[entry.word] = top_words.get(entry.word, 0) + entry.frequency

        hour = parse_hour(article.published_at)
        if hour is None:
            unparsed += 1
            logger.debug(f"Could not extract hour from time {article.published_at!r} (article {article.id})")
        else:
            bucket = bucket_for_hour(hour)
            setattr(trends, bucket, getattr(trends, bucket) + 1)

        report.word_count_trends.append(
            WordCountPoint(date=strip_zone_suffix(article.published_at), count=article.word_count)
        )
        total_words += article.word_count

    report.publishing_trends = trends
    report.average_word_count = round_half_up(total_words / report.total_articles)
    report.top_words = rank_words(top_words)

    if unparsed:
        logger.warning(f"{unparsed} of {report.total_articles} articles had no parseable publishing hour")
    logger.debug(f"Aggregated {report.total_articles} articles from {len(report.source_stats)} sources")

    return report
