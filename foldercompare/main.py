"""
Command line entry point for FolderCompare.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings and history loading
- Rendering the paired folder listing
- Running bulk copy, move and delete
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, List, TextIO

from foldercompare import __version__
from foldercompare.core.errors import FolderCompareError
from foldercompare.core.folder.comparer import FolderComparer
from foldercompare.core.folder.operations import FileOperations
from foldercompare.core.folder.scanner import DirectoryScanner
from foldercompare.core.models import (
    FolderCompareResult,
    OperationKind,
    PairedRow,
    RowStatus,
    TransferTarget,
)
from foldercompare.services.history import HistoryService
from foldercompare.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "foldercompare"

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_PRECONDITION = 2

STATUS_MARKERS = {
    RowStatus.IDENTICAL: "=",
    RowStatus.DIFFERENT: "!",
    RowStatus.LEFT_ONLY: "<",
    RowStatus.RIGHT_ONLY: ">",
}


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so it never mixes with the listing.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Compare two folders side by side and copy, move or delete entries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s compare left/ right/               List paired entries
  %(prog)s copy left/ right/ a.txt docs       Copy entries left -> right
  %(prog)s move right/ left/ old.log          Move an entry right -> left
  %(prog)s delete right/ tmp                  Delete an entry on the right
  %(prog)s verify left/ right/ a.txt          Compare one entry byte by byte
  %(prog)s history                            Show recent folder pairs
"""
    )

    parser.add_argument(
        '-c', '--config',
        type=Path,
        help='Configuration file path'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level (defaults to the configured level)'
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        help='Also write log records to this file'
    )
    parser.add_argument(
        '--no-history',
        action='store_true',
        help='Do not record folder pairs in the history'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    compare = subparsers.add_parser('compare', help='List paired entries of two folders')
    compare.add_argument('left', help='Left folder')
    compare.add_argument('right', help='Right folder')
    compare.add_argument(
        '-d', '--only-differences',
        action='store_true',
        help='Hide identical rows'
    )

    for name, help_text in (
        ('copy', 'Copy entries from SOURCE into DEST, overwriting'),
        ('move', 'Move entries from SOURCE into DEST, overwriting'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('source', help='Folder holding the entries')
        sub.add_argument('dest', help='Folder receiving the entries')
        sub.add_argument('names', nargs='+', help='Entry names inside SOURCE')

    delete = subparsers.add_parser('delete', help='Delete entries inside a folder')
    delete.add_argument('folder', help='Folder holding the entries')
    delete.add_argument('names', nargs='+', help='Entry names inside FOLDER')

    verify = subparsers.add_parser('verify', help='Compare one entry by content')
    verify.add_argument('left', help='Left folder')
    verify.add_argument('right', help='Right folder')
    verify.add_argument('name', help='Entry name (matched case-insensitively)')

    history = subparsers.add_parser('history', help='Show recently compared folder pairs')
    history.add_argument('--clear', action='store_true', help='Forget all entries')

    return parser


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments (defaults to sys.argv)."""
    return build_parser().parse_args(args)


# =============================================================================
# Rendering
# =============================================================================

def _row_cells(row: PairedRow) -> list[str]:
    cells = []
    for side in (row.left, row.right):
        if side is None:
            cells.extend(["", "", ""])
        else:
            cells.extend([side.display_name, side.size_display, side.modified_display])
    return cells


def render_result(
    result: FolderCompareResult,
    out: TextIO,
    only_differences: bool = False
) -> None:
    """Write the paired listing as a fixed-width table."""
    rows = [
        row for row in result.rows
        if not (only_differences and row.status == RowStatus.IDENTICAL)
    ]

    header = ["Left", "Size", "Modified", "Right", "Size", "Modified"]
    table = [header] + [_row_cells(row) for row in rows]
    widths = [max(len(line[i]) for line in table) for i in range(len(header))]

    def format_line(marker: str, cells: list[str]) -> str:
        left = "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells[:3]))
        right = "  ".join(cell.ljust(widths[i + 3]) for i, cell in enumerate(cells[3:]))
        return f"{left}  {marker}  {right}".rstrip()

    out.write(format_line(" ", header) + "\n")
    for row, cells in zip(rows, table[1:]):
        out.write(format_line(STATUS_MARKERS[row.status], cells) + "\n")
    out.write(result.summary() + "\n")


# =============================================================================
# Commands
# =============================================================================

def resolve_targets(
    folder: str,
    names: List[str],
    settings: ApplicationSettings
) -> list[TransferTarget]:
    """
    Turn entry names into operation targets.

    Names are looked up case-insensitively in a fresh scan of ``folder`` to
    learn whether they are directories; unknown names are passed on as
    plain files.
    """
    entries = DirectoryScanner(settings.to_scan_options()).scan(folder)
    by_key = {metadata.key: metadata for metadata in entries.values()}

    targets = []
    for name in names:
        metadata = by_key.get(name.casefold())
        if metadata is None:
            logging.info(f"main - {name!r} not found in {folder}")
            targets.append(TransferTarget(name=name))
        else:
            targets.append(TransferTarget.from_metadata(metadata))
    return targets


def run_compare(args: argparse.Namespace, settings: ApplicationSettings, out: TextIO) -> int:
    comparer = FolderComparer(settings.to_compare_options())
    result = comparer.compare(args.left, args.right)
    render_result(result, out, only_differences=args.only_differences)

    if not args.no_history:
        HistoryService(max_items=settings.history.max_items).add_pair(args.left, args.right)
    return EXIT_OK


def run_operation(args: argparse.Namespace, settings: ApplicationSettings, out: TextIO) -> int:
    kind = OperationKind(args.command)
    source = args.folder if kind == OperationKind.DELETE else args.source
    dest = None if kind == OperationKind.DELETE else args.dest

    targets = resolve_targets(source, args.names, settings)
    operations = FileOperations(settings.to_operation_options())
    result = operations.run(kind, targets, source, dest)

    for name, error in result.failures:
        out.write(f"failed: {name}: {error}\n")
    out.write(f"{kind.value}: {result}\n")

    return EXIT_PARTIAL_FAILURE if result.has_failures else EXIT_OK


def run_verify(args: argparse.Namespace, settings: ApplicationSettings, out: TextIO) -> int:
    comparer = FolderComparer(settings.to_compare_options())
    result = comparer.compare(args.left, args.right)
    row = result.find(args.name)

    if row is None:
        out.write(f"{args.name}: not found\n")
        return EXIT_PARTIAL_FAILURE

    if comparer.verify_row(row, args.left, args.right):
        out.write(f"{row.name}: identical content\n")
        return EXIT_OK

    out.write(f"{row.name}: content differs\n")
    return EXIT_PARTIAL_FAILURE


def run_history(args: argparse.Namespace, settings: ApplicationSettings, out: TextIO) -> int:
    history = HistoryService(max_items=settings.history.max_items)
    if args.clear:
        history.clear()
        return EXIT_OK

    for entry in history.load_history():
        out.write(entry + "\n")
    return EXIT_OK


COMMANDS = {
    'compare': run_compare,
    'copy': run_operation,
    'move': run_operation,
    'delete': run_operation,
    'verify': run_verify,
    'history': run_history,
}


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code: 0 on success, 1 when some items failed,
        2 when a folder was invalid and nothing was done
    """
    args = parse_arguments(argv)
    out = out or sys.stdout

    settings = SettingsManager(args.config).settings
    logger = setup_logging(args.log_level or settings.log_level, args.log_file)
    logger.debug(f"Starting {APP_NAME} v{__version__}: {args.command}")

    try:
        return COMMANDS[args.command](args, settings, out)
    except FolderCompareError as e:
        logger.error(str(e))
        out.write(f"error: {e}\n")
        return EXIT_PRECONDITION


if __name__ == '__main__':
    sys.exit(main())
