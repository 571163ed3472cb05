"""CLI entry point for gdocgen.

Usage:
    python -m gdocgen compile <input.json> [--type TYPE] [--output plan.json]
    python -m gdocgen generate <input.json> [--type TYPE] [--document-id ID_OR_URL]
    python -m gdocgen schema [--type TYPE]
    python -m gdocgen types
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import re
import sys
from pathlib import Path

from gdocgen.client import DocGenClient
from gdocgen.compiler import compile_document
from gdocgen.config import Settings, get_settings
from gdocgen.errors import DocGenError
from gdocgen.orchestrator import plan_batches
from gdocgen.sections import DocumentSpec
from gdocgen.templates import (
    DOCUMENT_TYPES,
    TemplateInput,
    build_document,
    document_type_descriptions,
    get_document_type,
)
from gdocgen.transport import GoogleDocsTransport, TransportError

CLI_ERRORS = (DocGenError, TransportError, OSError, ValueError)


def parse_document_id(id_or_url: str) -> str:
    """Extract document ID from a URL or return as-is if already an ID."""
    url_pattern = r"docs\.google\.com/document/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def load_spec(
    path: str | Path,
    doc_type: str | None = None,
    settings: Settings | None = None,
) -> DocumentSpec:
    """Read a DocumentSpec JSON file, or a {title, content} file for ``doc_type``."""
    text = Path(path).read_text(encoding="utf-8")
    if doc_type is None:
        return DocumentSpec.model_validate_json(text)
    data = TemplateInput.model_validate_json(text)
    return build_document(doc_type, data, settings or get_settings())


async def cmd_compile(args: argparse.Namespace) -> int:
    """Print the batch plan as JSON (dry run, no network)."""
    try:
        settings = get_settings()
        spec = load_spec(args.input, args.type, settings)
        compiled = compile_document(spec, settings=settings)
        plan, notices = plan_batches(compiled), compiled.notices
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = json.dumps(plan.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {len(plan.batches)} batches to {args.output}")
    else:
        print(output)
    for notice in notices:
        print(f"Warning: {notice}", file=sys.stderr)
    return 0


async def cmd_generate(args: argparse.Namespace) -> int:
    """Generate a Google Doc."""
    settings = get_settings()
    if not settings.access_token:
        print("Error: DOCGEN_ACCESS_TOKEN is not set", file=sys.stderr)
        return 1

    try:
        spec = load_spec(args.input, args.type, settings)
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    transport = GoogleDocsTransport(
        access_token=settings.access_token, timeout=settings.timeout
    )
    try:
        client = DocGenClient(transport, settings)
        document_id = parse_document_id(args.document_id) if args.document_id else None
        result = await client.generate(spec, document_id=document_id)
        print(result.message)
        print(result.url)
        for notice in result.notices:
            print(f"Warning: {notice}", file=sys.stderr)
        return 0
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await transport.close()


async def cmd_schema(args: argparse.Namespace) -> int:
    """Print the input JSON schema, or the content schema of a document type."""
    if args.type:
        model = get_document_type(args.type).content_model
        schema = model.model_json_schema(by_alias=True)
    else:
        schema = DocumentSpec.model_json_schema(by_alias=True)
    print(json.dumps(schema, indent=2))
    return 0


async def cmd_types(args: argparse.Namespace) -> int:  # noqa: ARG001
    """List the registered document types."""
    print(json.dumps(document_type_descriptions(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="gdocgen",
        description="Generate formatted Google Docs from structured JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log batch progress and downgrade details",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # compile subcommand
    compile_parser = subparsers.add_parser(
        "compile",
        help="Show the batchUpdate plan as JSON (dry run)",
    )
    compile_parser.add_argument("input", help="Path to a DocumentSpec JSON file")
    compile_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the plan to this file instead of stdout",
    )
    compile_parser.add_argument(
        "-t",
        "--type",
        choices=sorted(DOCUMENT_TYPES),
        default=None,
        help="Read a title/content JSON file for this document type",
    )
    compile_parser.set_defaults(func=cmd_compile)

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Create (or fill) a Google Doc",
    )
    generate_parser.add_argument("input", help="Path to a DocumentSpec JSON file")
    generate_parser.add_argument(
        "--document-id",
        default=None,
        help="Existing empty document ID or URL (defaults to a new document)",
    )
    generate_parser.add_argument(
        "-t",
        "--type",
        choices=sorted(DOCUMENT_TYPES),
        default=None,
        help="Read a title/content JSON file for this document type",
    )
    generate_parser.set_defaults(func=cmd_generate)

    # schema subcommand
    schema_parser = subparsers.add_parser(
        "schema",
        help="Print the DocumentSpec JSON schema",
    )
    schema_parser.add_argument(
        "-t",
        "--type",
        choices=sorted(DOCUMENT_TYPES),
        default=None,
        help="Print the content schema of this document type",
    )
    schema_parser.set_defaults(func=cmd_schema)

    # types subcommand
    types_parser = subparsers.add_parser(
        "types",
        help="List the document types usable with --type",
    )
    types_parser.set_defaults(func=cmd_types)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    result: int = asyncio.run(args.func(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
