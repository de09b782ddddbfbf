"""
Normalization, aggregation and chart projection for NewsLens.
"""

from .normalizer import normalize, normalize_articles
from .aggregator import aggregate
from .projector import project

__all__ = [
    'normalize',
    'normalize_articles',
    'aggregate',
    'project'
]
