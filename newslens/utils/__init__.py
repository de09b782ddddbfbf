"""
Utility modules for NewsLens.
"""

from .text_utils import tokenize, count_words
from .time_utils import cutoff

__all__ = [
    'tokenize',
    'count_words',
    'cutoff'
]
