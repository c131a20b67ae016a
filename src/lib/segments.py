"""
Segment extraction and comment consumption

Lookahead primitives used by block-level parsing once preprocessing is
done. Both operate on a LineBuffer and only consume what they return
(plus, for grab_segment, a stopping line that was neither preserved nor
grabbed).
"""

from typing import List

from ..models.directives import REGEXP
from ..models.reader import Segment, SegmentOptions
from .buffer import LineBuffer
from .log import LOG


def grab_segment(buffer: LineBuffer, options: SegmentOptions = SegmentOptions()) -> Segment:
    """
    Take lines from `buffer` until a stop condition

    A stop fires on a blank line (when break_on_blank_lines is set) or on
    the first line the stop predicate accepts. The stopping line is pushed
    back when preserve_last_line is set and appended to the result when
    grab_last_line is set; both, either or neither may apply. Running out of
    lines, or reaching a None line, ends the segment with stopped=False; the
    None itself is consumed and never reaches the stop predicate.

    Args:
        buffer: Buffer to consume from
        options: Stop conditions and handling of the stopping line

    Returns:
        Segment with the consumed lines and whether a stop fired

    Example:
        buffer = ["a\\n", "b\\n", "\\n", "c\\n"]
        grab_segment(buffer, SegmentOptions(break_on_blank_lines=True))
        -> Segment(lines=["a\\n", "b\\n"], stopped=True); buffer = ["c\\n"]
    """
    segment = Segment()
    # None reads as end of input, same as an exhausted buffer
    while (line := buffer.get_line()) is not None:
        LOG(f"Processing line: {line!r}", level=3)

        finis = options.break_on_blank_lines and not line.strip()
        if not finis and options.stop is not None:
            finis = bool(options.stop(line))

        if finis:
            if options.preserve_last_line:
                buffer.unshift(line)
            if options.grab_last_line:
                segment.lines.append(line)
            segment.stopped = True
            break

        segment.lines.append(line)
    return segment


def consume_comments(buffer: LineBuffer) -> List[str]:
    """
    Consume consecutive single-line and fenced block comments

    Stops at the first line that is neither; that line stays in the buffer.

    Args:
        buffer: Buffer to consume from

    Returns:
        The consumed comment lines, fences included (possibly empty)

    Example:
        buffer = ["// foo\\n", "////\\n", "foo bar\\n", "////\\n", "actual text\\n"]
        consume_comments(buffer) -> ["// foo\\n", "////\\n", "foo bar\\n", "////\\n"]
        buffer = ["actual text\\n"]
    """
    comment_lines: List[str] = []
    fence_options = SegmentOptions(
        preserve_last_line=True,
        stop=lambda line: REGEXP['comment_blk'].match(line) is not None,
    )

    while (next_line := buffer.peek_line()) is not None:
        if REGEXP['comment_blk'].match(next_line):
            comment_lines.append(buffer.get_line())
            body = grab_segment(buffer, fence_options)
            comment_lines.extend(body.lines)
            # unterminated block: the comment runs to the end of the input
            if body.stopped:
                comment_lines.append(buffer.get_line())
        elif REGEXP['comment'].match(next_line):
            comment_lines.append(buffer.get_line())
        else:
            break

    LOG(f"Consumed {len(comment_lines)} comment lines", level=3)
    return comment_lines
