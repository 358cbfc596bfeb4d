"""Documentation-comment enrichment engine.

Turns raw ``/** ... */`` comments and static-type facts into structured
doclets, and combines doclets describing the same symbol.
"""

from __future__ import annotations

from docletkit.combine import combine
from docletkit.context import DocletContext, current_context, use_context
from docletkit.dictionary import TagDefinition, TagDictionary
from docletkit.definitions import default_dictionary
from docletkit.doclet import Doclet, SourceMeta, SymbolInfo, create_doclet
from docletkit.settings import EngineSettings, load_settings

__all__ = [
    "Doclet",
    "DocletContext",
    "EngineSettings",
    "SourceMeta",
    "SymbolInfo",
    "TagDefinition",
    "TagDictionary",
    "combine",
    "create_doclet",
    "current_context",
    "default_dictionary",
    "load_settings",
    "use_context",
]
