"""
Pipeline orchestration and progress tracking for NewsLens.
"""

from .progress import ProgressTracker
from .pipeline_manager import PipelineManager

__all__ = [
    'ProgressTracker',
    'PipelineManager'
]
