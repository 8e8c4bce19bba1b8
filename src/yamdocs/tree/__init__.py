"""Tree subpackage: the Document Tree and its semantic annotations.

Re-exports the public API for the tree module:
- Mapping, Sequence, Scalar: the closed set of node kinds (``Node``)
- Document: a parsed document with diagnostics and comments
- attach_comments: the comment association pass
- ContextExtractor / Context / TypeTag: per-node description, type and default
"""

from yamdocs.tree.comments import attach_comments
from yamdocs.tree.context import (
    AnnotatedDocument,
    Context,
    ContextExtractor,
    TypeTag,
    format_path,
)
from yamdocs.tree.nodes import (
    Comment,
    CommentPosition,
    Document,
    Mapping,
    MappingEntry,
    Node,
    Path,
    Scalar,
    ScalarKind,
    ScalarStyle,
    Sequence,
)

__all__ = [
    "AnnotatedDocument",
    "Comment",
    "CommentPosition",
    "Context",
    "ContextExtractor",
    "Document",
    "Mapping",
    "MappingEntry",
    "Node",
    "Path",
    "Scalar",
    "ScalarKind",
    "ScalarStyle",
    "Sequence",
    "TypeTag",
    "attach_comments",
    "format_path",
]
