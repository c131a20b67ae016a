"""
Models package for adocprep

Contains data structures and type definitions for the preprocessing pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveKind, DirectiveMatch, REGEXP, line_classify
from .reader import SegmentOptions, Segment, ContinuationState, ConditionalSkipState

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveKind",
    "DirectiveMatch",
    "REGEXP",
    "line_classify",
    "SegmentOptions",
    "Segment",
    "ContinuationState",
    "ConditionalSkipState",
]
