"""gdocgen - Generate formatted Google Docs from structured input.

This library compiles a markup-free description of a document (headings,
paragraphs, lists, tables, callouts, code blocks, images) into ordered
Google Docs batchUpdate requests and applies them in dependency-ordered
batches.
"""

__version__ = "0.1.0"

from gdocgen.builder import DocumentBuilder
from gdocgen.client import DocGenClient, GenerateResult
from gdocgen.compiler import CompiledDocument, compile_document
from gdocgen.config import Settings, get_settings
from gdocgen.errors import (
    DocGenError,
    ErrorKind,
    InvalidColorError,
    InvalidRangeError,
    MissingSegmentIdError,
    Notice,
    PartialDocumentError,
    UpstreamBatchError,
)
from gdocgen.indexer import Range, utf16_len
from gdocgen.orchestrator import BatchPlan, Phase, execute_plan, plan_batches
from gdocgen.sections import DocumentSpec, HeaderFooterOptions, Run, Section
from gdocgen.transport import (
    APIError,
    AuthenticationError,
    GoogleDocsTransport,
    NotFoundError,
    RecordingTransport,
    Transport,
    TransportError,
)

__all__ = [
    "APIError",
    "AuthenticationError",
    "BatchPlan",
    "CompiledDocument",
    "DocGenClient",
    "DocGenError",
    "DocumentBuilder",
    "DocumentSpec",
    "ErrorKind",
    "GenerateResult",
    "GoogleDocsTransport",
    "HeaderFooterOptions",
    "InvalidColorError",
    "InvalidRangeError",
    "MissingSegmentIdError",
    "NotFoundError",
    "Notice",
    "PartialDocumentError",
    "Phase",
    "Range",
    "RecordingTransport",
    "Run",
    "Section",
    "Settings",
    "Transport",
    "TransportError",
    "UpstreamBatchError",
    "__version__",
    "compile_document",
    "execute_plan",
    "get_settings",
    "plan_batches",
    "utf16_len",
]
