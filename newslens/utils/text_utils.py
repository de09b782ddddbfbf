"""
Text processing utilities for NewsLens.
"""

import re
from collections import Counter
from typing import List, Optional

from newslens.models import WordFrequencyEntry

# Words of this length or shorter are dropped from frequency tables
MIN_WORD_LENGTH = 3

# Number of entries kept per article
MAX_FREQUENCY_ENTRIES = 10

_NON_WORD = re.compile(r'[^\w\s]')


def count_words(text: Optional[str]) -> int:
    """Count whitespace-delimited tokens; 0 for missing text."""
    if not text:
        return 0
    return len(text.split())


def tokenize(text: Optional[str],
             max_entries: int = MAX_FREQUENCY_ENTRIES) -> List[WordFrequencyEntry]:
    """
    Build the ranked word-frequency table of a text.

    The text is lowercased, stripped of every character that is neither a
    word character nor whitespace, and split on whitespace. Tokens of
    ``MIN_WORD_LENGTH`` characters or fewer are dropped.

    Args:
        text: Article content
        max_entries: Number of entries to keep

    Returns:
        Entries sorted by descending frequency. Ties keep the order in which
        the words first appeared.
    """
    if not text:
        return []

    cleaned = _NON_WORD.sub('', text.lower())
    words = [word for word in cleaned.split() if len(word) > MIN_WORD_LENGTH]

    # Counter keeps first-seen order and sorted() is stable
    frequencies = Counter(words)
    ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)

    return [WordFrequencyEntry(word=word, frequency=count)
            for word, count in ranked[:max_entries]]
