"""
Include directive expansion

A single forward pass over the raw source that splices the lines of each
include::PATH[] target in place of the directive line. Spliced lines are
not rescanned, so includes inside included content are left as ordinary
lines unless the resolver itself expands them.
"""

import re
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..config import appsettings
from ..models.directives import DirectiveKind, line_classify
from .log import LOG


IncludeResolver = Callable[[str], Union[str, Iterable[str]]]


def text_lines(text: str) -> List[str]:
    """
    Split text on '\\n' only, keeping the terminators

    Form feeds, vertical tabs and the other characters str.splitlines()
    treats as boundaries stay inside their line.

    Examples:
        text_lines('a\\fb\\nc') -> ['a\\x0cb\\n', 'c']
        text_lines('a\\r\\nb\\n') -> ['a\\r\\n', 'b\\n']
    """
    return re.findall(r'[^\n]*\n|[^\n]+', text)


def lines_split(data: Union[str, Iterable[str]]) -> List[str]:
    """
    Normalize source data into a list of lines

    A string is split with text_lines(); any other iterable is copied into
    a new list.
    """
    if isinstance(data, str):
        return text_lines(data)
    return list(data)


def include_read(path: str) -> List[str]:
    """
    Read an include target straight from disk

    Errors (missing file, permissions, decoding) propagate to the caller.

    Args:
        path: Include target exactly as written in the directive

    Returns:
        Lines of the file, terminators kept
    """
    return text_lines(Path(path).read_text(encoding=appsettings.include_encoding))


class IncludeExpander:
    """
    Replaces include directives with the lines of their targets

    Attributes:
        resolver: Callback mapping an include path to its lines (or text);
                  None reads the path from disk
        count: Number of include directives expanded by the last run
    """

    def __init__(self, resolver: Optional[IncludeResolver] = None):
        self.resolver = resolver
        self.count = 0

    def target_resolve(self, target: str) -> List[str]:
        """Fetch the lines for one include target"""
        if self.resolver is None:
            return include_read(target)
        return lines_split(self.resolver(target))

    def expand(self, lines: Iterable[str]) -> List[str]:
        """
        Expand every include directive in `lines`

        Args:
            lines: Raw source lines

        Returns:
            New list with include directives replaced by their targets' lines
        """
        self.count = 0
        expanded: List[str] = []
        for line in lines:
            match = line_classify(line) if line is not None else None
            if match is None or match.kind is not DirectiveKind.INCLUDE:
                expanded.append(line)
                continue

            included = self.target_resolve(match.target)
            LOG(f"Included {len(included)} lines from {match.target}", level=2)
            expanded.extend(included)
            self.count += 1
        return expanded
