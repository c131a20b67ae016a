"""
Segment extraction and comment consumption tests

Tests grab_lines_until / grab_segment stop handling and consume_comments
on line and fenced block comments.
"""

import pytest

from adocprep.lib.reader import Reader
from adocprep.models.reader import SegmentOptions


def is_stop(line):
    return line.startswith("STOP")


class TestGrabLinesUntil:
    """Test the list-returning lookahead"""

    def test_no_options_reads_everything(self):
        """Without stop conditions the whole buffer is returned"""
        reader = Reader(["a\n", "\n", "b\n"])
        assert reader.grab_lines_until() == ["a\n", "\n", "b\n"]
        assert reader.empty()

    def test_break_on_blank_lines(self):
        """The blank line stops the segment and is consumed"""
        reader = Reader(["a\n", "b\n", "\n", "c\n"])
        assert reader.grab_lines_until(break_on_blank_lines=True) == ["a\n", "b\n"]
        assert reader.lines == ["c\n"]

    def test_whitespace_line_counts_as_blank(self):
        """Whitespace-only lines are blank"""
        reader = Reader(["a\n", " \t\n", "c\n"])
        assert reader.grab_lines_until(break_on_blank_lines=True) == ["a\n"]

    def test_predicate_stop_dropped(self):
        """By default the stopping line is neither returned nor kept"""
        reader = Reader(["a\n", "STOP\n", "b\n"])
        assert reader.grab_lines_until(stop=is_stop) == ["a\n"]
        assert reader.lines == ["b\n"]

    def test_preserve_last_line(self):
        """preserve_last_line pushes the stopping line back"""
        reader = Reader(["a\n", "STOP\n", "b\n"])
        assert reader.grab_lines_until(preserve_last_line=True, stop=is_stop) == ["a\n"]
        assert reader.lines == ["STOP\n", "b\n"]

    def test_grab_last_line(self):
        """grab_last_line returns the stopping line"""
        reader = Reader(["a\n", "STOP\n", "b\n"])
        assert reader.grab_lines_until(grab_last_line=True, stop=is_stop) == ["a\n", "STOP\n"]
        assert reader.lines == ["b\n"]

    def test_preserve_and_grab(self):
        """Both options may apply to the same line"""
        reader = Reader(["a\n", "STOP\n", "b\n"])
        segment = reader.grab_lines_until(preserve_last_line=True, grab_last_line=True, stop=is_stop)
        assert segment == ["a\n", "STOP\n"]
        assert reader.lines == ["STOP\n", "b\n"]

    def test_first_line_stops(self):
        """A stop on the first line gives an empty segment"""
        reader = Reader(["STOP\n", "b\n"])
        assert reader.grab_lines_until(stop=is_stop) == []

    def test_blank_checked_before_predicate(self):
        """A blank stop fires even when the predicate would not"""
        reader = Reader(["a\n", "\n", "STOP\n"])
        assert reader.grab_lines_until(break_on_blank_lines=True, stop=is_stop) == ["a\n"]
        assert reader.lines == ["STOP\n"]


class TestGrabSegment:
    """Test the segment result with an explicit stop flag"""

    def test_stopped_by_predicate(self):
        """A predicate stop is reported"""
        reader = Reader(["a\n", "STOP\n"])
        segment = reader.grab_segment(SegmentOptions(stop=is_stop))
        assert segment.lines == ["a\n"]
        assert segment.stopped is True

    def test_exhausted(self):
        """Running out of lines is distinguishable from a stop"""
        reader = Reader(["a\n", "b\n"])
        segment = reader.grab_segment(SegmentOptions(stop=is_stop))
        assert segment.lines == ["a\n", "b\n"]
        assert segment.stopped is False

    def test_empty_reader(self):
        """An empty reader yields an empty, unstopped segment"""
        segment = Reader([]).grab_segment()
        assert segment.lines == []
        assert segment.stopped is False

    def test_interior_none_ends_segment(self):
        """A None line ends the segment like running out of lines"""
        reader = Reader(["a\n", None, "b\n"])
        assert reader.grab_lines_until(break_on_blank_lines=True) == ["a\n"]
        assert reader.lines == ["b\n"]

    def test_interior_none_is_not_a_stop(self):
        """The None line is consumed and the segment is not marked stopped"""
        reader = Reader(["a\n", None, "STOP\n"])
        segment = reader.grab_segment(SegmentOptions(stop=is_stop, preserve_last_line=True))
        assert segment.lines == ["a\n"]
        assert segment.stopped is False
        assert reader.lines == ["STOP\n"]

    def test_stop_predicate_never_sees_none(self):
        """Only real lines are handed to the stop predicate"""
        seen = []

        def stop(line):
            seen.append(line)
            return False

        Reader(["a\n", None, "b\n"]).grab_lines_until(stop=stop)
        assert seen == ["a\n"]


class TestConsumeComments:
    """Test comment consumption"""

    def test_line_and_block_comments(self):
        """A line comment followed by a block comment is one run"""
        reader = Reader(["// line\n", "////\n", "body\n", "////\n", "text\n"])
        assert reader.consume_comments() == ["// line\n", "////\n", "body\n", "////\n"]
        assert reader.lines == ["text\n"]

    def test_longer_fences(self):
        """Fences may be longer than four characters"""
        reader = Reader(["//////\n", "x\n", "//////\n", "y\n"])
        assert reader.consume_comments() == ["//////\n", "x\n", "//////\n"]
        assert reader.lines == ["y\n"]

    def test_block_may_contain_line_comments(self):
        """Everything up to the closing fence belongs to the block"""
        reader = Reader(["////\n", "// inner\n", "\n", "////\n"])
        assert reader.consume_comments() == ["////\n", "// inner\n", "\n", "////\n"]
        assert reader.empty()

    def test_unterminated_block(self):
        """A block with no closing fence runs to the end"""
        reader = Reader(["////\n", "x\n"])
        assert reader.consume_comments() == ["////\n", "x\n"]
        assert reader.empty()

    def test_empty_comment_line(self):
        """'//' alone is a line comment"""
        reader = Reader(["//\n", "text\n"])
        assert reader.consume_comments() == ["//\n"]

    def test_none_line_ends_comment_run(self):
        """A None line is not a comment and stays in the buffer"""
        reader = Reader(["// a\n", None, "// b\n"])
        assert reader.consume_comments() == ["// a\n"]
        assert reader.lines == [None, "// b\n"]

    def test_none_line_inside_block(self):
        """A None line ends an open block like the end of input"""
        reader = Reader(["////\n", "x\n", None, "////\n", "y\n"])
        assert reader.consume_comments() == ["////\n", "x\n"]
        assert reader.lines == ["////\n", "y\n"]

    @pytest.mark.parametrize("line", ["text\n", "///\n", "/// three slashes\n", "\n"])
    def test_non_comment_left_alone(self, line):
        """Nothing is consumed when the next line is not a comment"""
        reader = Reader([line, "more\n"])
        assert reader.consume_comments() == []
        assert reader.lines == [line, "more\n"]

    def test_comments_survive_preprocessing(self):
        """Comment lines are kept by the preprocessing pass for later consumption"""
        from adocprep.lib.document import Document

        reader = Reader(["// note\n", ":a: b\n", "text\n"], Document())
        assert reader.consume_comments() == ["// note\n"]
        assert reader.lines == ["text\n"]
