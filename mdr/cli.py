"""Command-line front door for mdr.

Parses CLI options, discovers markdown files, and loads them into a queue.
Then dispatches into the interactive viewer, or prints the rendered document
when output is not a terminal.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .config import load_viewer_config
from .documents.discovery import discover_markdown_paths
from .documents.queue import DocumentQueue
from .documents.source import load_document
from .render.screen import render_document_text
from .runtime.loop import ViewerSettings, run_viewer
from .search.engine import SearchSession
from .theme import Theme, available_theme_names, resolve_theme
from .viewer.frame import build_frame
from .viewer.state import ViewerState

logger = logging.getLogger(__name__)

USAGE = "Usage: mdr [--no-beeline] <path-to-markdown> [more paths or directories]"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def configure_logging(log_file: str | None) -> None:
    """Send ``mdr`` debug logs to ``log_file``; the terminal is never a target."""
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("mdr")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdr",
        description="Read markdown documents in the terminal.",
    )
    parser.add_argument("paths", nargs="*", help="Markdown files or directories to open.")
    parser.add_argument("--no-beeline", action="store_true", help="Start with the beeline gradient off.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for code blocks.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--render", metavar="PATH", help="Print the rendered document at PATH and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    parser.add_argument("--log-file", metavar="PATH", help="Write debug logs to PATH.")
    return parser


def render_content(
    content: str,
    theme: Theme,
    max_cols: int,
    *,
    beeline: bool,
    code_style: str | None,
    color: bool,
) -> str:
    """Lay out ``content`` with the viewer's frame code and return printable rows."""
    frame = build_frame(
        content,
        max_cols,
        theme,
        SearchSession(),
        beeline=beeline,
        code_style=code_style,
    )
    return render_document_text(frame, max_cols, color=color)


def _interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _load_queue(paths: list[Path]) -> DocumentQueue:
    documents = []
    for path in paths:
        try:
            documents.append(load_document(path))
        except OSError as exc:
            raise SystemExit(f"Failed to read {path}: {exc}") from exc
    return DocumentQueue(documents)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch mdr on the given paths."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file)

    config = load_viewer_config()
    theme = resolve_theme(args.theme or config.theme, no_color=args.no_color)
    code_style = args.style or config.style
    beeline = config.beeline and not args.no_beeline

    if args.render is not None:
        if args.paths:
            raise SystemExit("Cannot combine positional paths with --render.")
        target = Path(args.render)
        if not target.is_file():
            raise SystemExit(f"Path not found: {target}")
        max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
        try:
            out = render_content(
                load_document(target).content,
                theme,
                max_cols,
                beeline=beeline,
                code_style=code_style,
                color=not args.no_color,
            )
        except OSError as exc:
            raise SystemExit(f"Failed to read {target}: {exc}") from exc
        sys.stdout.write(out)
        return

    if not args.paths:
        raise SystemExit(USAGE)
    try:
        paths = discover_markdown_paths(args.paths)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    if not paths:
        raise SystemExit("No markdown files found.")
    queue = _load_queue(paths)
    logger.debug("loaded %d document(s)", len(queue))

    if not _interactive():
        max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
        for document in queue.documents:
            sys.stdout.write(
                render_content(
                    document.content,
                    theme,
                    max_cols,
                    beeline=beeline,
                    code_style=code_style,
                    color=False,
                )
            )
        return

    run_viewer(
        queue,
        picker_root=Path.cwd(),
        settings=ViewerSettings(theme=theme, code_style=code_style),
        state=ViewerState(beeline_enabled=beeline),
    )


if __name__ == "__main__":
    main()
