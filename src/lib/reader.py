"""
Reader: preprocessing pass and line access for document source

Turns raw document lines into the line stream block-level parsing works
on. Construction runs the whole preprocessing pass:

1. Include expansion: include::PATH[] lines replaced by their targets
2. One combined per-line pass over the expanded lines:
   - ifdef/ifndef/endif evaluation (single skip marker, no nesting)
   - attribute assignment, continuation and deletion
   - {name?text} conditional reference rewriting on surviving lines

Afterwards the Reader is a push-back capable line queue with lookahead
helpers (grab_lines_until, consume_comments, skip_blank, ...).

Example:
    >>> doc = Document()
    >>> reader = Reader([":project: adocprep\\n", "ifdef::project[]\\n",
    ...                  "In {project?a project}.\\n", "endif::project[]\\n"], doc)
    >>> reader.lines
    ['In a project.\\n']
    >>> doc.attributes['project']
    'adocprep'
"""

from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from ..models.directives import DirectiveKind, line_classify
from ..models.reader import Segment, SegmentOptions
from .attributes import AttributeDirectiveProcessor, sanitize_attribute_name
from .buffer import LineBuffer
from .conditionals import ConditionalProcessor
from .includes import IncludeExpander, IncludeResolver, lines_split
from .log import LOG
from .segments import consume_comments, grab_segment
from .substitutions import Substitutor


class Reader:
    """
    Preprocessor and line queue for one document source

    Attributes:
        document: Document whose attributes the pass reads and writes
                  (None when the data is already preprocessed)
        overrides: Attribute overrides that block body directives
        buffer: LineBuffer holding the surviving lines
    """

    def __init__(
        self,
        data: Union[str, Iterable[Optional[str]]] = (),
        document: Any = None,
        overrides: Optional[Mapping[str, Any]] = None,
        include_resolver: Optional[IncludeResolver] = None,
    ):
        """
        Initialize the reader, preprocessing `data` when a document is given

        Args:
            data: Source lines or a single source string; never modified
            document: Attribute document (see AttributeDocument); without
                      one the lines are taken as already preprocessed
            overrides: Mapping whose keys ('name' or 'name!') protect
                       attributes from body directives
            include_resolver: Callback (path) -> lines or text used for
                              include::PATH[]; default reads PATH from disk

        Raises:
            OSError: An include target could not be read from disk
        """
        self.document = document
        self.overrides: Mapping[str, Any] = MappingProxyType(dict(overrides or {}))
        raw = lines_split(data)

        if document is None:
            self.buffer = LineBuffer(raw)
        elif raw:
            self.buffer = LineBuffer(self.process(raw, include_resolver))
        else:
            self.buffer = LineBuffer()

        LOG(f"Leaving Reader#init, and I have {len(self.buffer)} lines", level=3)

    def process(self, data: List[str], include_resolver: Optional[IncludeResolver] = None) -> List[str]:
        """
        Run the preprocessing pass over raw source lines

        Skip state takes priority over continuation state, and continuation
        over directive classification. Lines the pass keeps are returned in
        order; the document's attribute store is updated as a side effect.

        Args:
            data: Raw source lines
            include_resolver: Include callback, see __init__

        Returns:
            Surviving lines
        """
        expander = IncludeExpander(include_resolver)
        source = LineBuffer(expander.expand(data))
        LOG(f"Expanded {expander.count} include directives", level=2)

        attributes = self.document.attributes
        conditionals = ConditionalProcessor()
        directives = AttributeDirectiveProcessor(self.document, attributes, self.overrides)
        substitutor = getattr(self.document, 'substitutor', None) or Substitutor()

        lines: List[str] = []
        while source.has_lines():
            line = source.get_line()
            if line is None:
                continue

            if conditionals.skipping:
                conditionals.line_skip(line)
                continue

            if directives.continuing:
                directives.continuation_line(line, source)
                continue

            match = line_classify(line)
            if match.kind is DirectiveKind.CONDITIONAL_OPEN:
                conditionals.conditional_open(match, attributes)
            elif match.kind is DirectiveKind.ATTR_ASSIGN:
                directives.attribute_assign(match)
            elif match.kind is DirectiveKind.ATTR_DELETE:
                directives.attribute_delete(match)
            elif match.kind is DirectiveKind.CONDITIONAL_CLOSE:
                LOG(f"Dropped unmatched endif: {line!r}", level=3)
            else:
                # Comment lines stay: they separate adjacent blocks downstream
                line = substitutor.conditional_refs_resolve(line, attributes)
                lines.append(line)

        if directives.continuing:
            LOG("Source ended inside an attribute continuation", level=2)
            directives.continuation_close()

        return lines

    @property
    def lines(self) -> List[str]:
        """Copy of the lines left to read"""
        return self.buffer.lines()

    @property
    def source(self) -> str:
        """The remaining lines joined into one string"""
        return ''.join(self.buffer.lines())

    def has_lines(self) -> bool:
        """Check whether there are any lines left to read"""
        return self.buffer.has_lines()

    def empty(self) -> bool:
        """Check whether this reader contains no lines"""
        return self.buffer.empty()

    def get_line(self) -> Optional[str]:
        """Consume and return the next line (None when empty)"""
        return self.buffer.get_line()

    def peek_line(self) -> Optional[str]:
        """Return the next line without consuming it (None when empty)"""
        return self.buffer.peek_line()

    def unshift(self, *new_lines: str) -> None:
        """Push lines back onto the front of the queue"""
        self.buffer.unshift(*new_lines)

    def skip_blank(self) -> None:
        """Strip off leading blank lines"""
        self.buffer.skip_blank()

    def skip_list_continuation(self) -> None:
        """Skip the next line if it's a list continuation character"""
        self.buffer.skip_list_continuation()

    def chomp_last(self) -> None:
        """Chomp the last line if this reader contains at least one line"""
        self.buffer.chomp_last()

    def consume_comments(self) -> List[str]:
        """Consume consecutive line and block comments, see segments.consume_comments"""
        return consume_comments(self.buffer)

    def grab_segment(self, options: SegmentOptions = SegmentOptions()) -> Segment:
        """Extract the next segment, reporting whether a stop condition fired"""
        return grab_segment(self.buffer, options)

    def grab_lines_until(
        self,
        break_on_blank_lines: bool = False,
        preserve_last_line: bool = False,
        grab_last_line: bool = False,
        stop: Optional[Callable[[str], bool]] = None,
    ) -> List[str]:
        """
        Return lines until the buffer runs out or a stop condition fires

        The returned list does not say which of the two happened; use
        grab_segment() when that matters.

        Args:
            break_on_blank_lines: Stop at a whitespace-only line
            preserve_last_line: Push the stopping line back
            grab_last_line: Include the stopping line in the result
            stop: Predicate marking the stopping line

        Returns:
            Lines forming the next segment

        Example:
            reader = Reader(["First paragraph\\n", "Second paragraph\\n",
                             "Open block\\n", "\\n", "Can have blank lines\\n"])
            reader.grab_lines_until(break_on_blank_lines=True)
            -> ["First paragraph\\n", "Second paragraph\\n", "Open block\\n"]
        """
        options = SegmentOptions(
            break_on_blank_lines=break_on_blank_lines,
            preserve_last_line=preserve_last_line,
            grab_last_line=grab_last_line,
            stop=stop,
        )
        return grab_segment(self.buffer, options).lines

    sanitize_attribute_name = staticmethod(sanitize_attribute_name)
