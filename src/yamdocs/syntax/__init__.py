"""Syntax subpackage: YAML text to a Document Tree.

Re-exports the public API for the syntax layer:
- Lexer: PyYAML-scanner-backed token source that keeps comments
- Token / TokenKind: the token stream's element type
- StructuralParser / parse: token stream to ``Document``
- split_documents: cut a multi-document stream into single documents
"""

from yamdocs.syntax.lexer import Lexer, split_documents
from yamdocs.syntax.parser import StructuralParser, parse
from yamdocs.syntax.tokens import Token, TokenKind

__all__ = ["Lexer", "StructuralParser", "Token", "TokenKind", "parse", "split_documents"]
