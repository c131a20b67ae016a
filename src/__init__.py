"""
adocprep - AsciiDoc-style source preprocessor

Expands includes, evaluates ifdef/ifndef/endif, applies attribute entries
and hands block-level parsing a push-back capable line reader.
"""

__version__ = "1.0.0"

from .lib import Reader, Document, LineBuffer, Substitutor, LOG, state_connectToLogger

__all__ = ["Reader", "Document", "LineBuffer", "Substitutor", "LOG", "state_connectToLogger", "__version__"]
