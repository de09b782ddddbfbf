"""
Projection of an AggregateReport into chart-ready series.

Each series can be built on its own; ``project`` builds all four.
"""

from typing import Dict

from newslens.models import AggregateReport, ChartDataset, ChartSeries

PUBLISHING_LABELS = ('Morning (6-12)', 'Afternoon (12-18)', 'Evening (18-24)', 'Night (0-6)')

# Bar charts show only the leading entries
MAX_BARS = 5


def publishing_series(report: AggregateReport) -> ChartSeries:
    trends = report.publishing_trends
    return ChartSeries(
        name='publishing',
        chart_type='pie',
        labels=PUBLISHING_LABELS,
        datasets=(ChartDataset(
            label='Articles Published',
            data=(trends.morning, trends.afternoon, trends.evening, trends.night),
        ),),
    )


def sources_series(report: AggregateReport) -> ChartSeries:
    sources = list(report.source_stats.items())[:MAX_BARS]
    return ChartSeries(
        name='sources',
        chart_type='bar',
        labels=tuple(name for name, _ in sources),
        datasets=(ChartDataset(label='Articles per Source', data=tuple(count for _, count in sources)),),
    )


def words_series(report: AggregateReport) -> ChartSeries:
    words = report.top_words[:MAX_BARS]
    return ChartSeries(
        name='words',
        chart_type='bar',
        labels=tuple(word for word, _ in words),
        datasets=(ChartDataset(label='Word Frequency', data=tuple(count for _, count in words)),),
    )


def word_count_series(report: AggregateReport) -> ChartSeries:
    """
    Word count over time.

    Labels are the distinct trend dates in first-seen order, while the
    dataset holds one count per article. When several articles share a
    date the dataset is longer than the label list.
    """
    labels = tuple(dict.fromkeys(point.date for point in report.word_count_trends))
    return ChartSeries(
        name='wordCount',
        chart_type='line',
        labels=labels,
        datasets=(ChartDataset(
            label='Word Count Over Time',
            data=tuple(point.count for point in report.word_count_trends),
        ),),
    )


def project(report: AggregateReport) -> Dict[str, ChartSeries]:
    """Build all four chart series of a report, keyed by series name."""
    series = (
        publishing_series(report),
        sources_series(report),
        words_series(report),
        word_count_series(report),
    )
    return {chart.name: chart for chart in series}
