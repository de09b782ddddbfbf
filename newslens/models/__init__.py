"""
Data models for the NewsLens news analytics system.
"""

from .article import (
    TimeWindow,
    RawArticle,
    WordFrequencyEntry,
    NormalizedArticle,
    PublishingTrends,
    WordCountPoint,
    AggregateReport,
    ChartDataset,
    ChartSeries,
    PhaseProgress,
    ProgressSnapshot,
    PipelineResult
)

__all__ = [
    'TimeWindow',
    'RawArticle',
    'WordFrequencyEntry',
    'NormalizedArticle',
    'PublishingTrends',
    'WordCountPoint',
    'AggregateReport',
    'ChartDataset',
    'ChartSeries',
    'PhaseProgress',
    'ProgressSnapshot',
    'PipelineResult'
]
