#!/usr/bin/env python3
"""
Archivist CLI: sorts media into a date-based archive and removes duplicates.
Subcommands: sort, dedup, find-duplicates, list.
Deduplication is a dry run unless --no-dry-run is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, NoReturn, Optional

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from archivist.aliases import (
    DEDUP_MODE_HELP_TEXT, EPILOG_TEXT, FIND_MODE_ALIASES, FIND_MODE_CHOICES,
    FIND_MODE_HELP_TEXT, IGNORES_HELP_TEXT, dedup_file_system_mode)
from archivist.commands import (
    DeduplicationCommand, FindDuplicatesCommand, ListCommand, SortCommand)
from archivist.core.deduplication import deduplicate
from archivist.core.errors import ArchiveError
from archivist.core.models import (
    DEFAULT_IGNORE_PATTERNS, DedupParams, FileSystemMode, FindParams, SortParams, SortResult)
from archivist.services.duplicate_groups import DuplicateGroupService


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="archivist",
            description="Archivist: sort photos and videos into a date-based archive",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        # sort
        sort_parser = subparsers.add_parser(
            "sort",
            help="Sort media files according to their capture date",
            formatter_class=argparse.RawTextHelpFormatter
        )
        sort_parser.add_argument("--source", "-s", required=True, type=str, help="Source directory")
        sort_parser.add_argument("--target", "-t", required=True, type=str, help="Target (archive) directory")
        sort_parser.add_argument(
            "--ignores", "-i",
            nargs="+",
            default=list(DEFAULT_IGNORE_PATTERNS),
            type=str,
            metavar='',
            help=IGNORES_HELP_TEXT
        )
        sort_parser.add_argument(
            "--watch", "-w",
            action="store_true",
            help="Keep watching the source directory after the initial run"
        )
        sort_parser.add_argument(
            "--dry-run", "-d",
            action="store_true",
            help="Don't change anything, only log what would be done"
        )

        # dedup
        dedup_parser = subparsers.add_parser(
            "dedup",
            help="Deduplicate the archive using a file of duplicate groups",
            description=DEDUP_MODE_HELP_TEXT,
            formatter_class=argparse.RawTextHelpFormatter
        )
        dedup_parser.add_argument("--directory", "-d", required=True, type=str,
                                  help="Archive directory to deduplicate in")
        dedup_parser.add_argument("--input", "-i", required=True, type=str,
                                  help="Path to a file with duplicate groups, one group per line")
        dedup_parser.add_argument("--delimiter", default=" ", type=str,
                                  help="Delimiter used in the input file. Default: space")
        dedup_parser.add_argument("--no-dry-run", action="store_true",
                                  help="Actually link and delete files")
        dedup_parser.add_argument("--trash", action="store_true",
                                  help="Move deleted files to the system trash")
        dedup_parser.add_argument("--force", action="store_true",
                                  help="Skip confirmation prompt (for automation/scripts)")

        # find-duplicates
        find_parser = subparsers.add_parser(
            "find-duplicates",
            help="Find duplicate groups inside an archive",
            formatter_class=argparse.RawTextHelpFormatter
        )
        find_parser.add_argument("--directory", "-d", required=True, type=str, help="Archive directory")
        find_parser.add_argument("--output", "-o", type=str, default=None,
                                 help="Write groups to this file instead of stdout")
        find_parser.add_argument("--mode", choices=FIND_MODE_CHOICES, default="exact", type=str,
                                 help=FIND_MODE_HELP_TEXT)
        find_parser.add_argument("--threshold", default=5, type=int,
                                 help="Max perceptual hash difference in bits. Default: 5")
        find_parser.add_argument("--delimiter", default=" ", type=str,
                                 help="Delimiter between paths of one group. Default: space")

        # list
        list_parser = subparsers.add_parser("list", help="List media type and capture date of files")
        list_parser.add_argument("--directory", "-d", required=True, type=str, help="Directory to list")

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        if self.quiet:
            level = logging.ERROR
        elif self.verbose:
            level = logging.INFO
        else:
            level = logging.WARNING
        logging.getLogger().setLevel(level)

    def validate_directory(self, path: str, label: str) -> None:
        resolved = Path(path).resolve()
        if not resolved.exists():
            self.error_exit(f"{label} not found: {path}")
        if not resolved.is_dir():
            self.error_exit(f"{label} is not a directory: {path}")

    # ===== sort =====

    def print_sort_result(self, path: str, result: Optional[SortResult], error: Optional[Exception]) -> None:
        if error is not None:
            self.warning(f"Can't sort file {path}: {error}")
        elif not self.quiet:
            print(f"{path}\t-->\t{result.canonical_path}")

    def run_sort(self, args: argparse.Namespace) -> None:
        self.validate_directory(args.source, "Source directory")
        if Path(args.source).resolve() == Path(args.target).resolve():
            self.error_exit("Source and target directories must not be the same.")
        try:
            params = SortParams(
                source_dir=str(Path(args.source).resolve()),
                archive_dir=str(Path(args.target).resolve()),
                ignore_patterns=args.ignores,
                watch=args.watch,
                mode=FileSystemMode.DRY_RUN if args.dry_run else FileSystemMode.REAL,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

        command = SortCommand()
        try:
            report = command.execute(params, result_callback=self.print_sort_result)
        except (ArchiveError, RuntimeError) as e:
            self.error_exit(f"Failed to sort: {e}")

        if self.verbose:
            print(report.print_summary())

        if params.watch:
            if not self.quiet:
                print("Finished initial run. Watching folder for changes (Ctrl+C to stop).")
            command.watch(params, result_callback=self.print_sort_result)

    # ===== dedup =====

    def preview_dedup(self, archive_dir: str, groups: List[List[str]]) -> int:
        """Prints planned operations; returns number of files to delete."""
        to_delete = 0
        for idx, group in enumerate(groups, 1):
            try:
                task = deduplicate(archive_dir, group)
            except ArchiveError as e:
                self.error_exit(f"Group {idx} cannot be deduplicated: {e}")
            print(f"📁 Group {idx} | Files: {len(group)}")
            print(f"   [KEEP] {task.to_keep}")
            for path in task.recreate_links:
                print(f"   [LINK] {path}")
            for path in task.delete_files:
                print(f"   [DEL]  {path}")
            to_delete += len(task.delete_files)
        return to_delete

    def run_dedup(self, args: argparse.Namespace) -> None:
        self.validate_directory(args.directory, "Archive directory")
        if args.trash and not args.no_dry_run:
            self.warning("--trash has no effect without --no-dry-run")
        try:
            params = DedupParams(
                archive_dir=args.directory,
                input_file=args.input,
                delimiter=args.delimiter,
                mode=dedup_file_system_mode(args.no_dry_run, args.trash),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

        try:
            groups = DuplicateGroupService.load(params.input_file, params.delimiter)
        except OSError as e:
            self.error_exit(f"Can't open input file: {e}")

        if params.mode != FileSystemMode.DRY_RUN and not args.force:
            to_delete = self.preview_dedup(params.archive_dir, groups)
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation."
                )
            action = "move to trash" if params.mode == FileSystemMode.TRASH else "delete"
            response = input(f"Are you sure you want to {action} {to_delete} files? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deduplication cancelled by user.")
                return

        try:
            report = DeduplicationCommand().execute(params, groups=groups)
        except (ArchiveError, OSError) as e:
            self.error_exit(f"Failed to deduplicate files: {e}")

        if not self.quiet:
            print(report.print_summary())
            if params.mode == FileSystemMode.DRY_RUN:
                print("Dry run: nothing was changed. Use --no-dry-run to apply.")

    # ===== find-duplicates =====

    def run_find(self, args: argparse.Namespace) -> None:
        self.validate_directory(args.directory, "Archive directory")
        try:
            params = FindParams(
                archive_dir=str(Path(args.directory).resolve()),
                mode=FIND_MODE_ALIASES[args.mode],
                threshold=args.threshold,
                delimiter=args.delimiter,
                output_file=args.output,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

        try:
            groups = FindDuplicatesCommand().execute(params)
        except (RuntimeError, OSError, ValueError) as e:
            self.error_exit(f"Failed to find duplicates: {e}")

        if params.output_file:
            if not self.quiet:
                print(f"Found {len(groups)} duplicate groups, written to {params.output_file}")
            return
        sys.stdout.write(DuplicateGroupService.format_groups([g.paths for g in groups], params.delimiter))

    # ===== list =====

    def run_list(self, args: argparse.Namespace) -> None:
        self.validate_directory(args.directory, "Directory")
        try:
            infos = ListCommand().execute(args.directory)
        except RuntimeError as e:
            self.error_exit(f"Could not list all files: {e}")
        for info in infos:
            if info.failed_stage == "date":
                print(f"could not determine capture date {info.path}: {info.error}")
            elif info.error:
                print(f"not a video or image {info.path}: {info.error}")
            elif info.is_media:
                print(f"capture date of file {info.path} is: {info.capture_date}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        handlers = {
            "sort": self.run_sort,
            "dedup": self.run_dedup,
            "find-duplicates": self.run_find,
            "list": self.run_list,
        }
        handlers[args.command](args)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
