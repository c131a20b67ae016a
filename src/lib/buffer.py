"""
Push-back capable line buffer

The shared substrate of the preprocessor: an ordered, double-ended queue of
source lines consumed front to back, with one-line (or one-segment)
lookahead implemented by pushing lines back onto the front.

Example:
    >>> buffer = LineBuffer(["\\n", "First\\n", "Second\\n"])
    >>> buffer.skip_blank()
    >>> buffer.get_line()
    'First\\n'
    >>> buffer.unshift("First\\n")
    >>> buffer.peek_line()
    'First\\n'
"""

from collections import deque
from typing import Deque, Iterable, List, Optional

from ..models.directives import REGEXP


def line_chomp(line: str) -> str:
    """Remove a single trailing line terminator ("\\r\\n", "\\n" or "\\r")"""
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n') or line.endswith('\r'):
        return line[:-1]
    return line


class LineBuffer:
    """
    Ordered mutable sequence of source lines

    Backed by collections.deque, so popping from and pushing to the front are
    O(1). No random access is offered; callers only ever look at the front
    (and at the tail, for chomp_last).

    Trailing None sentinels in the initial data are trimmed on construction.
    """

    def __init__(self, lines: Optional[Iterable[Optional[str]]] = None):
        """
        Initialize the buffer with a copy of `lines`

        Args:
            lines: Initial lines; the iterable itself is never modified
        """
        self._lines: Deque[Optional[str]] = deque(lines or ())
        while self._lines and self._lines[-1] is None:
            self._lines.pop()

    def __len__(self) -> int:
        return len(self._lines)

    def lines(self) -> List[str]:
        """Copy of the remaining lines, front first"""
        return list(self._lines)

    def has_lines(self) -> bool:
        """Check whether there are any lines left to read"""
        return bool(self._lines)

    def empty(self) -> bool:
        """Check whether the buffer contains no lines"""
        return not self._lines

    def get_line(self) -> Optional[str]:
        """
        Consume and return the next line

        Returns:
            The front line, or None if the buffer is empty
        """
        if not self._lines:
            return None
        return self._lines.popleft()

    def peek_line(self) -> Optional[str]:
        """
        Return the next line without consuming it

        Strings are immutable, so the returned value is already a detached
        copy of the buffered line.

        Returns:
            The front line, or None if the buffer is empty
        """
        if not self._lines:
            return None
        return self._lines[0]

    def unshift(self, *new_lines: str) -> None:
        """
        Push lines back onto the front, keeping their order

        A call with no lines is a no-op.

        Example:
            buffer = ["c\\n"]; buffer.unshift("a\\n", "b\\n") -> ["a\\n", "b\\n", "c\\n"]
        """
        if new_lines:
            self._lines.extendleft(reversed(new_lines))

    def skip_blank(self) -> None:
        """Drop leading whitespace-only lines"""
        while self._lines and not (self._lines[0] or '').strip():
            self._lines.popleft()

    def skip_list_continuation(self) -> None:
        """Drop the next line if it is exactly the list continuation marker '+'"""
        if self._lines and REGEXP['list_continuation'].match(line_chomp(self._lines[0] or '')):
            self._lines.popleft()

    def chomp_last(self) -> None:
        """Strip the line terminator from the final line, if there is one"""
        if self._lines and self._lines[-1] is not None:
            self._lines[-1] = line_chomp(self._lines[-1])
