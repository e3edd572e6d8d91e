"""Command-line entry point: list notes, search them, and replace a term across them."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable

from pydantic import ValidationError

from core.config import Settings, get_settings
from notes_client.api_client import create_http_client
from notes_client.note_store import RemoteNoteStore
from services.exceptions import BatchUpdateError, InvalidStateError, NotesClientError
from services.highlight_renderer import created_label, render_first_line, to_console_markup
from services.search_controller import SearchController


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the notes CLI."""
    parser = argparse.ArgumentParser(
        prog="notes-client",
        description="Search and replace text across your notes.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List notes (first line and creation time)")

    search = subparsers.add_parser("search", help="Show notes containing a term")
    search.add_argument("term", help="Literal, case-sensitive text to find")

    replace = subparsers.add_parser("replace", help="Replace a term in every matching note")
    replace.add_argument("term", help="Literal, case-sensitive text to find")
    replace.add_argument("replacement", help="Replacement text (may be empty)")
    replace.add_argument(
        "--yes",
        action="store_true",
        help="Apply without asking for confirmation",
    )
    return parser


def _print_notes(controller: SearchController) -> None:
    for rendered in controller.rendered():
        if controller.search_state.term:
            print(f"# {rendered.note.id}")
            for block in rendered.blocks:
                print(to_console_markup(block))
        else:
            print(render_first_line(rendered.note.content))
        print(created_label(rendered.note))
        print()


def _print_progress(completed: int, total: int) -> None:
    print(f"Updated {completed}/{total} notes")


async def run(
    args: argparse.Namespace,
    settings: Settings,
    confirm: Callable[[str], str] = input,
) -> int:
    """Run one CLI command against the note store. Returns the process exit code."""
    async with create_http_client(settings) as client:
        controller = SearchController(RemoteNoteStore(client, settings.api_token))
        try:
            await controller.load()
            if args.command == "list":
                _print_notes(controller)
                return 0

            matches = controller.set_search(args.term)
            if args.command == "search":
                _print_notes(controller)
                print(f"{len(matches)} matching notes")
                return 0

            controller.stage_replacement(args.replacement)
            _print_notes(controller)
            if not matches:
                print(f"No notes contain '{args.term}'")
                return 0
            if not args.yes:
                prompt = f"Replace in {len(matches)} notes? [y/N] "
                answer = await asyncio.to_thread(confirm, prompt)
                if answer.strip().lower() not in {"y", "yes"}:
                    controller.cancel_replacement()
                    print("Cancelled")
                    return 0

            summary = await controller.confirm_replacement(on_progress=_print_progress)
            print(f"Replaced '{summary.term}' in {summary.completed} notes")
            return 0
        except BatchUpdateError as e:
            for failure in e.failures:
                print(f"  {failure}", file=sys.stderr)
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except (NotesClientError, InvalidStateError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run(args, settings)))


if __name__ == "__main__":
    main()
