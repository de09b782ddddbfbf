"""
Export functions for NewsLens articles and reports.
"""

import json
import csv
import pandas as pd
from pathlib import Path
from typing import List, Dict, Optional
from datetime import datetime
from loguru import logger

from newslens.models import NormalizedArticle, AggregateReport, ChartSeries
from config.settings import DATA_PATHS

CSV_FIELDS = [
    'id', 'title', 'description', 'source_name', 'author', 'url',
    'published_at', 'published_datetime', 'category', 'word_count', 'top_words'
]


def _export_dir(export_dir: Optional[Path]) -> Path:
    path = Path(export_dir) if export_dir else DATA_PATHS['exports']
    path.mkdir(parents=True, exist_ok=True)
    return path


def export_articles(articles: List[NormalizedArticle],
                    format: str = 'json',
                    filename: Optional[str] = None,
                    export_dir: Optional[Path] = None) -> str:
    """
    Export articles to various formats.

    Args:
        articles: List of articles to export
        format: Export format ('json', 'csv', 'excel')
        filename: Optional filename. If None, generates timestamp-based name.
        export_dir: Target directory. Defaults to the configured exports path.

    Returns:
        Path to exported file, or an empty string when there is nothing to export
    """
    if not articles:
        logger.warning("No articles to export")
        return ""

    # Generate filename if not provided
    if not filename:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"articles_{timestamp}"

    export_path = _export_dir(export_dir)

    if format.lower() == 'json':
        return _export_to_json(articles, export_path / f"{filename}.json")
    elif format.lower() == 'csv':
        return _export_to_csv(articles, export_path / f"{filename}.csv")
    elif format.lower() == 'excel':
        return _export_to_excel(articles, export_path / f"{filename}.xlsx")
    else:
        raise ValueError(f"Unsupported export format: {format}")


def _article_row(article: NormalizedArticle) -> Dict[str, object]:
    return {
        'id': article.id,
        'title': article.title,
        'description': article.description,
        'source_name': article.source_name,
        'author': article.author or '',
        'url': article.url,
        'published_at': article.published_at,
        'published_datetime': article.published_datetime.isoformat() if article.published_datetime else '',
        'category': article.category or '',
        'word_count': article.word_count,
        'top_words': ', '.join(f"{e.word}:{e.frequency}" for e in article.word_frequencies),
    }


def _export_to_json(articles: List[NormalizedArticle], filepath: Path) -> str:
    """Export articles to JSON format."""
    data = {
        'export_info': {
            'timestamp': datetime.now().isoformat(),
            'total_articles': len(articles),
            'format_version': '1.0'
        },
        'articles': [article.to_dict() for article in articles]
    }

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Exported {len(articles)} articles to JSON: {filepath}")
    return str(filepath)


def _export_to_csv(articles: List[NormalizedArticle], filepath: Path) -> str:
    """Export articles to CSV format."""
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for article in articles:
            writer.writerow(_article_row(article))

    logger.info(f"Exported {len(articles)} articles to CSV: {filepath}")
    return str(filepath)


def _export_to_excel(articles: List[NormalizedArticle], filepath: Path) -> str:
    """Export articles to Excel, with a second sheet of per-source counts."""
    df = pd.DataFrame([_article_row(article) for article in articles], columns=CSV_FIELDS)

    with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name='Articles', index=False)

        sources = df.groupby('source_name').size().reset_index(name='articles')
        sources.to_excel(writer, sheet_name='Sources', index=False)

    logger.info(f"Exported {len(articles)} articles to Excel: {filepath}")
    return str(filepath)


def export_report(report: AggregateReport,
                  series: Optional[Dict[str, ChartSeries]] = None,
                  filename: Optional[str] = None,
                  export_dir: Optional[Path] = None) -> str:
    """
    Save a report and its chart series to a JSON file.

    Args:
        report: Aggregate report
        series: Chart series keyed by name, as returned by ``project``
        filename: Optional filename (without extension)
        export_dir: Target directory. Defaults to the configured exports path.

    Returns:
        Path to saved file
    """
    if not filename:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"report_{timestamp}"

    filepath = _export_dir(export_dir) / f"{filename}.json"
    data = {
        'timestamp': datetime.now().isoformat(),
        'report': report.to_dict(),
        'charts': {name: chart.to_dict() for name, chart in (series or {}).items()}
    }

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved report to: {filepath}")
    return str(filepath)
