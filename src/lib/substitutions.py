"""
Substitution engine used by the preprocessor

Implements the named substitution steps applied to attribute values and
the inline conditional attribute reference token ({name?text}) resolved
on every surviving content line.

Substitution names:
    specialcharacters: &, <, > to HTML entities
    quotes:            *strong*, _emphasis_, `monospaced`
    attributes:        {name} references to attribute values
    replacements:      (C), (R), (TM), --, ... to entities
    post_replacements: trailing " +" hard line break to <br>

Composite names (see COMPOSITE_SUBS) expand to an ordered list of the
names above.

Example:
    >>> Substitutor().apply_subs("(C) {owner}", ["normal"], {"owner": "ACME"})
    '&#169; ACME'
"""

import re
from typing import Callable, Dict, List, Mapping, Pattern, Sequence

from .log import LOG


COMPOSITE_SUBS: Dict[str, List[str]] = {
    'none': [],
    'normal': ['specialcharacters', 'quotes', 'attributes', 'replacements', 'post_replacements'],
    'verbatim': ['specialcharacters'],
}

HEADER_SUBS: List[str] = ['specialcharacters', 'attributes']

SPECIAL_CHARS: Dict[str, str] = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
}

# (pattern, replacement) pairs, applied in order
QUOTE_RULES: List[tuple] = [
    (re.compile(r'(^|[^\w*])\*(\S|\S.*?\S)\*(?![\w*])'), r'\1<strong>\2</strong>'),
    (re.compile(r'(^|[^\w_])_(\S|\S.*?\S)_(?![\w_])'), r'\1<em>\2</em>'),
    (re.compile(r'(^|[^\w`])`(\S|\S.*?\S)`(?![\w`])'), r'\1<code>\2</code>'),
]

REPLACEMENT_RULES: List[tuple] = [
    (re.compile(r'\(C\)'), '&#169;'),
    (re.compile(r'\(R\)'), '&#174;'),
    (re.compile(r'\(TM\)'), '&#8482;'),
    (re.compile(r'(^|\s)--(\s|$)', re.MULTILINE), r'\1&#8212;\2'),
    (re.compile(r'\.\.\.'), '&#8230;'),
]

ATTRIBUTE_REF: Pattern[str] = re.compile(r'(\\)?\{([\w-]+)\}')
LINE_BREAK: Pattern[str] = re.compile(r' \+$', re.MULTILINE)
CONDITIONAL_REF: Pattern[str] = re.compile(r'\{([\w-]+)\?([^}]*)\}')


def legalSubs_names() -> List[str]:
    """
    Names a passthrough macro (pass:NAMES[...]) may request

    Returns:
        Composite keys followed by the members of the 'normal' composite
    """
    return list(COMPOSITE_SUBS.keys()) + COMPOSITE_SUBS['normal']


class Substitutor:
    """
    Applies named substitution sets to text

    Stateless apart from the step table; attribute values are passed in on
    each call so the caller always sees the store as of the current line.
    """

    def __init__(self) -> None:
        self.steps: Dict[str, Callable[[str, Mapping[str, str]], str]] = {
            'specialcharacters': self.specialcharacters_sub,
            'quotes': self.quotes_sub,
            'attributes': self.attributes_sub,
            'replacements': self.replacements_sub,
            'post_replacements': self.postReplacements_sub,
        }

    def subs_expand(self, subs: Sequence[str]) -> List[str]:
        """
        Expand composite names into their member steps

        Unknown names are dropped. Order is kept, duplicates are removed.

        Example:
            subs_expand(['verbatim', 'quotes']) -> ['specialcharacters', 'quotes']
        """
        expanded: List[str] = []
        for name in subs:
            members = COMPOSITE_SUBS.get(name, [name])
            for member in members:
                if member in self.steps and member not in expanded:
                    expanded.append(member)
        return expanded

    def apply_subs(self, text: str, subs: Sequence[str], attributes: Mapping[str, str]) -> str:
        """
        Apply the named substitutions to `text`

        Args:
            text: Text to transform
            subs: Substitution names, composite or single
            attributes: Attribute values for the 'attributes' step

        Returns:
            Transformed text
        """
        for name in self.subs_expand(subs):
            text = self.steps[name](text, attributes)
        return text

    def apply_header_subs(self, text: str, attributes: Mapping[str, str]) -> str:
        """Apply the substitutions used for header-level attribute values"""
        return self.apply_subs(text, HEADER_SUBS, attributes)

    def specialcharacters_sub(self, text: str, attributes: Mapping[str, str]) -> str:
        return ''.join(SPECIAL_CHARS.get(ch, ch) for ch in text)

    def quotes_sub(self, text: str, attributes: Mapping[str, str]) -> str:
        for pattern, replacement in QUOTE_RULES:
            text = pattern.sub(replacement, text)
        return text

    def attributes_sub(self, text: str, attributes: Mapping[str, str]) -> str:
        """
        Replace {name} with the attribute value

        Undefined references are left as written. A backslash in front of
        the reference escapes it and is removed.
        """
        def reference_resolve(match: 're.Match[str]') -> str:
            escaped, name = match.group(1), match.group(2)
            if escaped:
                return '{' + name + '}'
            if name in attributes:
                return str(attributes[name])
            LOG(f"Undefined attribute reference: {{{name}}}", level=3)
            return match.group(0)

        return ATTRIBUTE_REF.sub(reference_resolve, text)

    def replacements_sub(self, text: str, attributes: Mapping[str, str]) -> str:
        for pattern, replacement in REPLACEMENT_RULES:
            text = pattern.sub(replacement, text)
        return text

    def postReplacements_sub(self, text: str, attributes: Mapping[str, str]) -> str:
        return LINE_BREAK.sub('<br>', text)

    def conditional_refs_resolve(self, line: str, attributes: Mapping[str, str]) -> str:
        """
        Rewrite every {name?text} token on a line

        Each token becomes `text` when `name` is defined and '' otherwise.
        Tokens are replaced one at a time, left to right, until none remain;
        every replacement removes a closing brace, so the loop terminates.

        Args:
            line: Content line (line terminator preserved)
            attributes: Attribute store as of this line's position

        Returns:
            Rewritten line

        Example:
            {"draft": ""} and "Status: {draft?DRAFT}{final?FINAL}\\n"
            -> "Status: DRAFT\\n"
        """
        match = CONDITIONAL_REF.search(line)
        while match:
            value = match.group(2) if match.group(1) in attributes else ''
            line = line[:match.start()] + value + line[match.end():]
            match = CONDITIONAL_REF.search(line)
        return line
