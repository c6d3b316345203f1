"""Tag listing commands for tagnav CLI."""

from ...core.config import Config
from ...core.types import ranked_tags
from .common import build_navigator


def add_tags_arguments(parser) -> None:
    """Add arguments for the tags command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("path", help="Directory of markdown documents")
    parser.add_argument(
        "-m",
        "--min-count",
        type=int,
        default=None,
        help="Only list tags with at least this many occurrences",
    )


def handle_tags(args, config: Config) -> None:
    """Print every tag with its total occurrence count, most used first."""
    navigator = build_navigator(args.path, config)
    counts = navigator.tag_counts(min_count=args.min_count)
    if not counts:
        print("No tags found.")
        return

    width = max(len(tag) for tag in counts)
    for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        print(f"{tag:<{width}}  {count}")


def handle_lines(args, config: Config) -> None:
    """Print the tags that apply to one line of a document.

    Tags are listed by how often the document uses them, most used first.
    """
    navigator = build_navigator(args.path, config)
    document = navigator.index.get_document(args.document)
    tags = navigator.tags_at_line(args.document, args.line)
    if not tags:
        print(f"No tags on {args.document}:{args.line}")
        return
    for tag, _ in ranked_tags(document.tags):
        if tag in tags:
            print(tag)
