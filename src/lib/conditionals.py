"""
Conditional directive processing (ifdef / ifndef / endif)

Keeps a single optional skip marker. Conditionals do not nest: while a skip
is active every line is dropped, inner conditional directives included, and
the first matching endif ends the skip even if it belongs to an inner block.
"""

from typing import Mapping, Optional

from ..models.directives import DirectiveMatch, endif_patternMake
from ..models.reader import ConditionalSkipState
from .log import LOG


class ConditionalProcessor:
    """
    Single-pattern skip state machine

    Attributes:
        skip: Active skip marker, or None when lines are being kept
    """

    def __init__(self) -> None:
        self.skip: Optional[ConditionalSkipState] = None

    @property
    def skipping(self) -> bool:
        return self.skip is not None

    def line_skip(self, line: str) -> None:
        """
        Consume a line while skipping

        The line is always dropped; if it is the awaited endif the skip ends.
        """
        if self.skip.line_isTerminator(line):
            LOG(f"Skip ended at endif::{self.skip.name}[]", level=2)
            self.skip = None
        else:
            LOG(f"Skipped: {line!r}", level=3)

    def conditional_open(self, match: DirectiveMatch, attributes: Mapping[str, object]) -> None:
        """
        Evaluate an ifdef/ifndef directive

        ifdef skips when the attribute is undefined, ifndef when it is
        defined. The directive line itself never survives.

        Args:
            match: CONDITIONAL_OPEN classification of the line
            attributes: Attribute store as of this line
        """
        defined = match.name in attributes
        if match.value == 'ifdef':
            skip = not defined
        else:
            skip = defined

        if skip:
            self.skip = ConditionalSkipState(match.name, endif_patternMake(match.name))
            LOG(f"{match.value}::{match.name}[] false, skipping to endif", level=2)
        else:
            LOG(f"{match.value}::{match.name}[] true, keeping content", level=2)
