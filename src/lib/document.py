"""
Document collaborator for the preprocessor

The Reader only needs a narrow slice of a document: an attribute store it
can mutate in line order, a hook to run when 'backend' changes, and access
to the substitution engine. AttributeDocument spells that contract out;
Document is the default implementation used by the CLI and the tests.
"""

import re
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Protocol, Sequence, Union

from ..config import appsettings
from .log import LOG
from .substitutions import Substitutor


class AttributeDocument(Protocol):
    """Interface the Reader expects from its document"""

    attributes: MutableMapping[str, Any]

    def update_backend_attributes(self) -> None: ...

    def apply_subs(self, text: str, subs: Sequence[str]) -> str: ...

    def apply_header_subs(self, text: str) -> str: ...


class Document:
    """
    Minimal document: attribute store, overrides and substitutions

    Overrides are applied to the attribute store on construction ('name'
    sets a value, 'name!' deletes it) and are then handed to every Reader
    built through reader(), which keeps directives in the body from
    touching them.

    Example:
        >>> doc = Document(overrides={"author": "Jane", "toc!": ""})
        >>> doc.attributes["author"]
        'Jane'
        >>> doc.attributes["basebackend"]
        'html'
    """

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        substitutor: Optional[Substitutor] = None,
    ):
        """
        Initialize the document

        Args:
            attributes: Initial attribute values (copied)
            overrides: Attribute overrides; keys ending in '!' delete
            substitutor: Substitution engine (default: Substitutor())
        """
        self.substitutor = substitutor or Substitutor()
        self.overrides: dict = dict(overrides or {})
        self.attributes: dict = {'backend': appsettings.default_backend}
        self.attributes.update(attributes or {})

        for key, value in self.overrides.items():
            if key.endswith('!'):
                self.attributes.pop(key[:-1], None)
            else:
                self.attributes[key] = '' if value is None else str(value)

        self.update_backend_attributes()

    def update_backend_attributes(self) -> None:
        """
        Recompute the attributes derived from 'backend'

        Sets 'basebackend' (backend without trailing version digits),
        'outfilesuffix' and a 'backend-<name>' flag; the flag belonging to
        the previous backend is removed. With no backend all derived
        attributes are removed.
        """
        for key in [k for k in self.attributes if k.startswith('backend-')]:
            del self.attributes[key]

        backend = self.attributes.get('backend')
        if not backend:
            self.attributes.pop('basebackend', None)
            self.attributes.pop('outfilesuffix', None)
            LOG("Backend cleared", level=2)
            return

        basebackend = re.sub(r'\d+$', '', backend) or backend
        self.attributes['basebackend'] = basebackend
        self.attributes['outfilesuffix'] = f".{basebackend}"
        self.attributes[f'backend-{backend}'] = ''
        LOG(f"Backend set to '{backend}' (basebackend '{basebackend}')", level=2)

    def apply_subs(self, text: str, subs: Sequence[str]) -> str:
        """Apply the named substitutions against this document's attributes"""
        return self.substitutor.apply_subs(text, subs, self.attributes)

    def apply_header_subs(self, text: str) -> str:
        """Apply header-level substitutions against this document's attributes"""
        return self.substitutor.apply_header_subs(text, self.attributes)

    def reader(self, data: Union[str, Iterable[str]], include_resolver=None):
        """
        Build a Reader over `data` bound to this document and its overrides

        Args:
            data: Source lines or a single source string
            include_resolver: Optional include callback, see Reader

        Returns:
            Preprocessed Reader
        """
        from .reader import Reader
        return Reader(data, self, self.overrides, include_resolver=include_resolver)
