"""
Data models for news articles, analytics reports and pipeline progress.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Dict, List, Any, Tuple
from enum import Enum


class TimeWindow(Enum):
    """Lookback periods used to filter stored articles."""
    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"
    ALL_TIME = "all"

    @classmethod
    def from_value(cls, value: Any) -> 'TimeWindow':
        """Accept either a TimeWindow or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ', '.join(w.value for w in cls)
            raise ValueError(f"Unknown time window {value!r} (expected one of: {choices})")


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class RawArticle:
    """Article as returned by the search feed, before normalization."""
    title: Optional[str] = None
    description: Optional[str] = None
    source_name: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RawArticle':
        """
        Build a RawArticle from one entry of the feed's ``articles`` array.

        Fields that are missing or of the wrong JSON type become None so
        that the normalizer applies its defaults explicitly.

        Args:
            data: Article object from the feed response

        Returns:
            RawArticle instance
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected article object, got {type(data).__name__}")

        source = data.get('source')
        source_name = _optional_str(source.get('name')) if isinstance(source, dict) else None

        return cls(
            title=_optional_str(data.get('title')),
            description=_optional_str(data.get('description')),
            source_name=source_name,
            author=_optional_str(data.get('author')),
            url=_optional_str(data.get('url')),
            published_at=_optional_str(data.get('publishedAt')),
            content=_optional_str(data.get('content')),
        )


@dataclass(frozen=True)
class WordFrequencyEntry:
    """One (word, frequency) pair of an article's top-word table."""
    word: str
    frequency: int

    def __post_init__(self):
        if self.frequency < 1:
            raise ValueError(f"Word frequency must be >= 1, got {self.frequency} for {self.word!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {'word': self.word, 'frequency': self.frequency}


@dataclass(frozen=True)
class NormalizedArticle:
    """Canonical article record, as persisted."""
    title: str
    description: str
    source_name: str
    author: Optional[str]
    url: str
    published_at: str
    content: str
    category: Optional[str]
    word_count: int
    word_frequencies: Tuple[WordFrequencyEntry, ...] = ()
    published_datetime: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        if self.word_count < 0:
            raise ValueError(f"word_count must be non-negative, got {self.word_count}")
        if len(self.word_frequencies) > 10:
            raise ValueError("An article carries at most 10 word frequency entries")

    def with_id(self, article_id: int) -> 'NormalizedArticle':
        """Return a copy carrying the id assigned by the store."""
        return replace(self, id=article_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert article to dictionary format."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'source_name': self.source_name,
            'author': self.author,
            'url': self.url,
            'published_at': self.published_at,
            'published_datetime': self.published_datetime.isoformat() if self.published_datetime else None,
            'content': self.content,
            'category': self.category,
            'word_count': self.word_count,
            'word_frequencies': [entry.to_dict() for entry in self.word_frequencies],
        }


@dataclass
class PublishingTrends:
    """Article counts per time-of-day bucket."""
    morning: int = 0    # 6-12
    afternoon: int = 0  # 12-18
    evening: int = 0    # 18-24
    night: int = 0      # 0-6

    def total(self) -> int:
        return self.morning + self.afternoon + self.evening + self.night

    def to_dict(self) -> Dict[str, int]:
        return {
            'morning': self.morning,
            'afternoon': self.afternoon,
            'evening': self.evening,
            'night': self.night,
        }


@dataclass(frozen=True)
class WordCountPoint:
    """Word count of one article, labelled by its publishing time."""
    date: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'count': self.count}


@dataclass
class AggregateReport:
    """Statistical summary over a collection of articles."""
    total_articles: int = 0
    average_word_count: Optional[int] = None
    source_stats: Dict[str, int] = field(default_factory=dict)
    category_stats: Dict[str, int] = field(default_factory=dict)
    top_words: List[Tuple[str, int]] = field(default_factory=list)
    publishing_trends: PublishingTrends = field(default_factory=PublishingTrends)
    word_count_trends: List[WordCountPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalArticles': self.total_articles,
            'averageWordCount': self.average_word_count,
            'sourceStats': dict(self.source_stats),
            'categoryStats': dict(self.category_stats),
            'topWords': [[word, count] for word, count in self.top_words],
            'publishingTrends': self.publishing_trends.to_dict(),
            'wordCountTrends': [point.to_dict() for point in self.word_count_trends],
        }


@dataclass(frozen=True)
class ChartDataset:
    """One numeric series of a chart, aligned with the chart labels."""
    label: str
    data: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'data': list(self.data)}


@dataclass(frozen=True)
class ChartSeries:
    """Chart-ready projection of part of an AggregateReport."""
    name: str
    chart_type: str
    labels: Tuple[str, ...]
    datasets: Tuple[ChartDataset, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.chart_type,
            'labels': list(self.labels),
            'datasets': [dataset.to_dict() for dataset in self.datasets],
        }


@dataclass(frozen=True)
class PhaseProgress:
    """Progress of one pipeline phase."""
    current: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {'current': self.current, 'total': self.total}


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time view of a pipeline run's progress."""
    processing: PhaseProgress = field(default_factory=PhaseProgress)
    saving: PhaseProgress = field(default_factory=PhaseProgress)
    word_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'processing': self.processing.to_dict(),
            'saving': self.saving.to_dict(),
            'wordCount': self.word_count,
        }


@dataclass
class PipelineResult:
    """Outcome of one acquire -> normalize -> persist -> aggregate run."""
    query: str
    category: Optional[str]
    articles: List[NormalizedArticle]
    report: AggregateReport
    progress: ProgressSnapshot
    processing_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
