"""
Normalization of raw feed articles into canonical records.
"""

from typing import List, Optional, TYPE_CHECKING
from loguru import logger

from newslens.models import RawArticle, NormalizedArticle
from newslens.utils.text_utils import count_words, tokenize
from newslens.utils.time_utils import parse_timestamp, format_time_of_day

if TYPE_CHECKING:
    from newslens.pipeline.progress import ProgressTracker

UNKNOWN_SOURCE = 'Unknown'


def normalize(raw: RawArticle, category: Optional[str] = None) -> NormalizedArticle:
    """
    Map one raw feed article to a canonical record.

    Missing text fields default to empty strings, a missing source to
    'Unknown'. The publishing time is kept only as 'HH:MM:SS+00' in
    ``published_at``; the full instant goes to ``published_datetime``.
    Unparseable timestamps leave both empty.

    Args:
        raw: Article as returned by the feed
        category: Caller-supplied category, None if uncategorized

    Returns:
        NormalizedArticle with its word-frequency table attached
    """
    published = parse_timestamp(raw.published_at)
    if published is None and raw.published_at:
        logger.debug(f"Unparseable publishedAt {raw.published_at!r} for {raw.url}")

    content = raw.content or ''

    return NormalizedArticle(
        title=raw.title or '',
        description=raw.description or '',
        source_name=raw.source_name or UNKNOWN_SOURCE,
        author=raw.author or None,
        url=raw.url or '',
        published_at=format_time_of_day(published) if published else '',
        content=content,
        category=category or None,
        word_count=count_words(content),
        word_frequencies=tuple(tokenize(content)),
        published_datetime=published,
    )


def normalize_articles(raws: List[RawArticle],
                       category: Optional[str] = None,
                       tracker: Optional['ProgressTracker'] = None) -> List[NormalizedArticle]:
    """
    Normalize a batch in feed order, reporting each article to the tracker.

    Args:
        raws: Articles from the feed
        category: Category applied to every article of the batch
        tracker: Progress tracker of the current run

    Returns:
        Normalized articles in the same order
    """
    normalized = []
    for raw in raws:
        article = normalize(raw, category)
        normalized.append(article)
        if tracker is not None:
            tracker.record_processed(article)

    logger.info(f"Normalized {len(normalized)} articles (category={category})")
    return normalized
