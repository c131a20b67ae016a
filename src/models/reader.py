"""
Reader-specific data models

Type-safe structures for segment extraction and the transient state kept
while the preprocessing pass walks the source lines.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern


@dataclass(frozen=True)
class SegmentOptions:
    """
    Configuration for a "read until stop condition" lookahead

    Consumed by grab_segment() / Reader.grab_lines_until().

    Attributes:
        break_on_blank_lines: Stop when a whitespace-only line is read
        preserve_last_line: Push the stopping line back onto the buffer
        grab_last_line: Include the stopping line in the returned segment
                        (independent of preserve_last_line)
        stop: Optional predicate; the first line it returns True for stops
              the segment

    Example:
        Stop at a block delimiter and leave it in the buffer:
        SegmentOptions(preserve_last_line=True, stop=lambda l: l.startswith('--'))
    """
    break_on_blank_lines: bool = False
    preserve_last_line: bool = False
    grab_last_line: bool = False
    stop: Optional[Callable[[str], bool]] = None


@dataclass
class Segment:
    """
    Result of a segment extraction

    Attributes:
        lines: Lines consumed before the stop, in source order (plus the
               stopping line when grab_last_line was set)
        stopped: True when a blank-line or predicate stop fired, False when
                 the buffer simply ran out of lines
    """
    lines: List[str] = field(default_factory=list)
    stopped: bool = False


@dataclass
class ContinuationState:
    """
    An attribute value spanning several physical lines

    Alive only between the opening ':name: value +' line and the line that
    closes the continuation.

    Attributes:
        name: Sanitized attribute name
        value: Value accumulated so far (continuation markers stripped)
    """
    name: str
    value: str

    def value_append(self, text: str) -> None:
        """Join another fragment onto the value with a single space"""
        self.value += ' ' + text


@dataclass
class ConditionalSkipState:
    """
    Active "skip until this endif" marker

    Only one can be active at a time; conditionals do not nest.

    Attributes:
        name: Attribute name of the conditional that started skipping
        pattern: Compiled pattern of the endif line that ends the skip
    """
    name: str
    pattern: Pattern[str]

    def line_isTerminator(self, line: str) -> bool:
        """Check whether `line` is the endif that ends this skip"""
        return self.pattern.match(line) is not None
