"""
adocprep - AsciiDoc-style source preprocessor

Core library: line buffer, directive processors, reader and the document
and substitution collaborators.
"""

__version__ = "1.0.0"

from .buffer import LineBuffer
from .document import Document, AttributeDocument
from .reader import Reader
from .substitutions import Substitutor, COMPOSITE_SUBS
from .log import LOG, state_connectToLogger

__all__ = [
    "LineBuffer",
    "Document",
    "AttributeDocument",
    "Reader",
    "Substitutor",
    "COMPOSITE_SUBS",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
