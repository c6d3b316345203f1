"""Query command for tagnav CLI."""

import json

from ...core.config import Config
from .common import build_navigator


def add_query_arguments(parser) -> None:
    """Add arguments for the query command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("path", help="Directory of markdown documents")
    parser.add_argument(
        "query",
        help='Query as JSON, e.g. \'[[{"tag": "a"}, {"tag": "b"}], [{"tag": "c"}]]\'',
    )
    parser.add_argument(
        "-c",
        "--current",
        help="Document id that 'current' note references resolve to",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )


def handle_query(args, config: Config) -> None:
    """Evaluate a query and print the matching text blocks.

    Raises:
        QueryValidationError: If the query is malformed.
    """
    navigator = build_navigator(args.path, config)
    result = navigator.evaluate(args.query, current_document_id=args.current)
    blocks = navigator.materialize(result)

    if args.json:
        payload = {
            doc_id: [{"line": b.first_line, "text": b.text} for b in doc_blocks]
            for doc_id, doc_blocks in sorted(blocks.items())
        }
        print(json.dumps(payload, indent=2))
        return

    if not blocks:
        print("No results found.")
        return

    for doc_id, doc_blocks in sorted(blocks.items()):
        print(f"\n{doc_id}")
        print("-" * len(doc_id))
        for block in doc_blocks:
            for offset, text in enumerate(block.text.split("\n")):
                print(f"{block.first_line + offset:>5}: {text}")
