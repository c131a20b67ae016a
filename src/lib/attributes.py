"""
Attribute directive processing

Handles the attribute entry directives found in the document body:

    :name: value         assign (value may be empty)
    :name: value +       assign, value continues on following lines
    :name!:              delete

Writes go straight into the attribute store handed in by the caller, in
line order, so later lines observe earlier assignments. An override for a
name always wins: directives touching an overridden name have no effect.
"""

import re
from types import MappingProxyType
from typing import Any, Mapping, MutableMapping, Optional

from ..models.directives import DirectiveMatch, REGEXP
from ..models.reader import ContinuationState
from .buffer import LineBuffer
from .log import LOG
from .substitutions import legalSubs_names


def sanitize_attribute_name(name: str) -> str:
    """
    Convert a string to a legal attribute name.

    Removes every character other than word characters and hyphens, then
    lowercases.

    Examples:
        sanitize_attribute_name('Foo Bar') -> 'foobar'
        sanitize_attribute_name('foo') -> 'foo'
        sanitize_attribute_name('Foo 3 #-Billy') -> 'foo3-billy'
    """
    return re.sub(r'[^\w\-]', '', name).lower()


class AttributeDirectiveProcessor:
    """
    Applies attribute assignments, continuations and deletions

    Attributes:
        document: Collaborator providing substitutions and the backend hook
        attributes: Attribute store mutated in place (normally
                    document.attributes)
        overrides: Read-only override mapping; 'name' or 'name!' blocks
                   directives on 'name'
        continuation: Open continuation, or None
    """

    def __init__(
        self,
        document: Any,
        attributes: MutableMapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
    ):
        self.document = document
        self.attributes = attributes
        self.overrides = overrides if overrides is not None else MappingProxyType({})
        self.continuation: Optional[ContinuationState] = None

    @property
    def continuing(self) -> bool:
        return self.continuation is not None

    def attribute_isOverridden(self, key: str) -> bool:
        """Check whether `key` was overridden by the caller"""
        return key in self.overrides or f'{key}!' in self.overrides

    def value_substitute(self, value: str) -> str:
        """
        Apply substitutions to an attribute value

        A value that is exactly an inline passthrough (pass:SUBS[text]) gets
        only the requested substitutions that are legal for the macro, or
        none at all when that list is empty. Any other value gets the
        document's header substitutions.

        Examples:
            'pass:[<b>]'                   -> '<b>'
            'pass:specialcharacters[<b>]'  -> '&lt;b&gt;'
            'pass:bogus[<b>]'              -> '<b>'
            'A & B'                        -> 'A &amp; B'
        """
        match = REGEXP['pass_macro_basic'].match(value)
        if match is None:
            return self.document.apply_header_subs(value)

        subs_requested, text = match.group(1), match.group(2)
        subs = []
        if subs_requested:
            legal = legalSubs_names()
            subs = [sub for sub in subs_requested.split(',') if sub in legal]
        if subs:
            return self.document.apply_subs(text, subs)
        return text

    def attribute_store(self, key: str, value: str) -> None:
        """Write a resolved value unless the key is overridden"""
        if self.attribute_isOverridden(key):
            LOG(f"Attribute '{key}' is overridden, assignment ignored", level=2)
            return

        self.attributes[key] = self.value_substitute(value)
        LOG(f"Defines[{key}] is '{self.attributes[key]}'", level=2)
        if key == 'backend':
            self.document.update_backend_attributes()

    def attribute_assign(self, match: DirectiveMatch) -> None:
        """
        Handle an ':name: value' line

        A trailing ' +' on the value opens a continuation instead of
        writing immediately.
        """
        key = sanitize_attribute_name(match.name)
        continued = REGEXP['attr_continue'].match(match.value)
        if continued:
            self.continuation = ContinuationState(key, continued.group(1))
            LOG(f"Continuing key: {key} with partial value: '{continued.group(1)}'", level=3)
            return
        self.attribute_store(key, match.value)

    def attribute_delete(self, match: DirectiveMatch) -> None:
        """Handle a ':name!:' line"""
        key = sanitize_attribute_name(match.name)
        if self.attribute_isOverridden(key):
            LOG(f"Attribute '{key}' is overridden, deletion ignored", level=2)
            return

        self.attributes.pop(key, None)
        LOG(f"Deleted attribute '{key}'", level=2)
        if key == 'backend':
            self.document.update_backend_attributes()

    def continuation_line(self, line: str, buffer: LineBuffer) -> None:
        """
        Feed the next physical line to the open continuation

        - ends with ' +': append (marker stripped), stay open
        - blank: push it back onto `buffer` for normal processing, close
        - anything else: append (stripped), close

        Args:
            line: The line just taken from `buffer`
            buffer: Source buffer of the running pass
        """
        continued = REGEXP['attr_continue'].match(line)
        if continued:
            self.continuation.value_append(continued.group(1))
            return

        if not line.strip():
            buffer.unshift(line)
        else:
            self.continuation.value_append(line.strip())
        self.continuation_close()

    def continuation_close(self) -> None:
        """Resolve the open continuation into a store write"""
        state, self.continuation = self.continuation, None
        self.attribute_store(state.name, state.value)
