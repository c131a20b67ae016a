"""
Directive grammar and per-line classification models

Defines the regular expressions recognised by the preprocessor and the
tagged DirectiveMatch returned when a raw line is classified.
"""

import re
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional, Pattern


class DirectiveKind(Enum):
    """
    Kinds of line-level preprocessor directives

    PLAIN covers every line that is not a recognised directive, which is
    the permissive default: no match means ordinary content.
    """
    INCLUDE = "include"                        # include::PATH[]
    ATTR_ASSIGN = "attr_assign"                # :name: value
    ATTR_DELETE = "attr_delete"                # :name!:
    CONDITIONAL_OPEN = "conditional_open"      # ifdef::NAME[] / ifndef::NAME[]
    CONDITIONAL_CLOSE = "conditional_close"    # endif::NAME[]
    PLAIN = "plain"


# Line grammar used across the preprocessor
REGEXP: Dict[str, Pattern[str]] = {
    'include_macro': re.compile(r'^include::([^\[]+)\[\]\s*$'),
    'ifdef_macro': re.compile(r'^(ifdef|ifndef)::([^\[]+)\[\]'),
    'endif_macro': re.compile(r'^endif::'),
    'attr_assign': re.compile(r'^:([^:!]+):[ \t]*(.*?)[ \t]*$'),
    'attr_delete': re.compile(r'^:([^:]+)!:\s*$'),
    'attr_continue': re.compile(r'^\s*(.*)\s\+\s*$'),
    'pass_macro_basic': re.compile(r'^pass:([a-z,]*)\[(.*)\]$'),
    'comment_blk': re.compile(r'^/{4,}\s*$'),
    'comment': re.compile(r'^//(?:[^/]|$)'),
    'list_continuation': re.compile(r'^\+$'),
}


@dataclass(frozen=True)
class DirectiveMatch:
    """
    Result of classifying one raw source line

    Attributes:
        kind: Which directive the line is (PLAIN when none)
        name: Attribute name for assignments, deletions and conditionals
              (raw, before sanitizing)
        value: Assigned value for ATTR_ASSIGN, conditional keyword
               ("ifdef"/"ifndef") for CONDITIONAL_OPEN
        target: Include path for INCLUDE

    Example:
        For ":Author Name: Jane\\n":
        DirectiveMatch(kind=ATTR_ASSIGN, name="Author Name", value="Jane")
    """
    kind: DirectiveKind
    name: Optional[str] = None
    value: Optional[str] = None
    target: Optional[str] = None


def line_classify(line: str) -> DirectiveMatch:
    """
    Classify a raw line into a single DirectiveMatch.

    The checks run in a fixed order; the first match wins. Conditional
    openers are tested before assignments so that a line can never be
    both.

    Args:
        line: Raw source line, with or without its line terminator

    Returns:
        DirectiveMatch tagged with the directive kind
    """
    match = REGEXP['include_macro'].match(line)
    if match:
        return DirectiveMatch(DirectiveKind.INCLUDE, target=match.group(1))

    match = REGEXP['ifdef_macro'].match(line)
    if match:
        return DirectiveMatch(
            DirectiveKind.CONDITIONAL_OPEN, name=match.group(2), value=match.group(1)
        )

    match = REGEXP['attr_assign'].match(line)
    if match:
        return DirectiveMatch(
            DirectiveKind.ATTR_ASSIGN, name=match.group(1), value=match.group(2)
        )

    match = REGEXP['attr_delete'].match(line)
    if match:
        return DirectiveMatch(DirectiveKind.ATTR_DELETE, name=match.group(1))

    if REGEXP['endif_macro'].match(line):
        return DirectiveMatch(DirectiveKind.CONDITIONAL_CLOSE)

    return DirectiveMatch(DirectiveKind.PLAIN)


def endif_patternMake(name: str) -> Pattern[str]:
    """Build the pattern for the endif line that closes a conditional on `name`"""
    return re.compile(r'^endif::' + re.escape(name) + r'\[\]\s*$')
