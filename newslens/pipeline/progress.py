"""
Two-phase progress accounting for a single pipeline run.
"""

from typing import Callable, List
from loguru import logger

from newslens.models import NormalizedArticle, PhaseProgress, ProgressSnapshot

ProgressListener = Callable[[ProgressSnapshot], None]


class ProgressTracker:
    """
    Tracks the processing and saving phases of one pipeline run.

    A tracker belongs to exactly one run and must be driven sequentially:
    one ``record_processed`` and one ``record_saved`` per article, in
    article order. Listeners receive an immutable snapshot after every
    update.
    """

    def __init__(self):
        self._listeners: List[ProgressListener] = []
        self._snapshot = ProgressSnapshot()

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._snapshot

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a callback invoked with every new snapshot."""
        self._listeners.append(listener)

    def reset(self, total_to_process: int) -> None:
        """Zero all counters at the start of a run."""
        if total_to_process < 0:
            raise ValueError(f"total_to_process must be non-negative, got {total_to_process}")
        self._emit(ProgressSnapshot(processing=PhaseProgress(0, total_to_process)))

    def start_saving(self, total_to_save: int) -> None:
        """Open the saving phase for ``total_to_save`` records."""
        if total_to_save < 0:
            raise ValueError(f"total_to_save must be non-negative, got {total_to_save}")
        current = self._snapshot
        self._emit(ProgressSnapshot(
            processing=current.processing,
            saving=PhaseProgress(0, total_to_save),
            word_count=current.word_count,
        ))

    def record_processed(self, article: NormalizedArticle) -> None:
        current = self._snapshot
        processing = current.processing
        if processing.current >= processing.total:
            raise ValueError(f"Processed more articles than expected ({processing.total})")
        self._emit(ProgressSnapshot(
            processing=PhaseProgress(processing.current + 1, processing.total),
            saving=current.saving,
            word_count=current.word_count,
        ))

    def record_saved(self, article: NormalizedArticle) -> None:
        current = self._snapshot
        saving = current.saving
        if saving.current >= saving.total:
            raise ValueError(f"Saved more articles than expected ({saving.total})")
        self._emit(ProgressSnapshot(
            processing=current.processing,
            saving=PhaseProgress(saving.current + 1, saving.total),
            word_count=current.word_count + article.word_count,
        ))

    def _emit(self, snapshot: ProgressSnapshot) -> None:
        self._snapshot = snapshot
        for listener in self._listeners:
            listener(snapshot)


def log_progress(snapshot: ProgressSnapshot) -> None:
    """Listener that writes progress to the log."""
    logger.debug(
        f"Processing {snapshot.processing.current}/{snapshot.processing.total} | "
        f"Saving {snapshot.saving.current}/{snapshot.saving.total} | "
        f"Words {snapshot.word_count:,}"
    )
