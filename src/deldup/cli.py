#!/usr/bin/env python3
"""
deldup CLI: command line interface for deleting files already present in an official tree.
Deletion moves files to the system trash unless --permanent is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, NoReturn, Optional
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from deldup.commands import DuplicateScanCommand
from deldup.core.models import DuplicateDecision, MatchVerdict, ScanParams
from deldup.core.errors import ReadError
from deldup.services.deletion_policy import DeletionOutcome, DeletionPolicy
from deldup.services.export_service import ExportService
from deldup.utils.convert_utils import ConvertUtils
from deldup.aliases import (
    DESCRIPTION_TEXT, DUMP_HELP_TEXT, ENTER_ZIP_HELP_TEXT, EPILOG_TEXT,
    NEW_HELP_TEXT, OFFICIAL_HELP_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, prompt=None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.prompt = prompt

        self.duplicates: int = 0
        self.false_positives: List[DuplicateDecision] = []
        self.unreadable: int = 0

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="deldup",
            description=DESCRIPTION_TEXT,
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument("official", help=OFFICIAL_HELP_TEXT)
        parser.add_argument("new", nargs="?", default=None, help=NEW_HELP_TEXT)

        parser.add_argument(
            "--yes", "-y",
            action="store_true",
            dest="delete_all",
            help="Delete all duplicated files without asking"
        )
        parser.add_argument(
            "--enter-zip", "-z",
            action="store_true",
            dest="enter_zip",
            help=ENTER_ZIP_HELP_TEXT
        )
        parser.add_argument(
            "--follow-links", "-l",
            action="store_true",
            dest="follow_links",
            help="Descend into symbolically linked directories (linked files are never indexed)"
        )
        parser.add_argument(
            "--dump", "-d",
            action="store_true",
            help=DUMP_HELP_TEXT
        )
        parser.add_argument(
            "--permanent",
            action="store_true",
            help="Delete files permanently instead of moving them to the trash"
        )
        parser.add_argument(
            "--parallel",
            action="store_true",
            help="Index both directories at the same time"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Log every visited directory and skipped file"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.dump and args.new is not None:
            self.error_exit("--dump takes only the official directory")
        if not args.dump and args.new is None:
            self.error_exit("Directory with new files is required (or use --dump)")
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose are mutually exclusive")

        directories = [args.official] if args.dump else [args.official, args.new]
        for directory in directories:
            path = Path(directory)
            if not path.exists():
                self.error_exit(f"Directory not found: {directory}")
            if not path.is_dir():
                self.error_exit(f"Path is not a directory: {directory}")

        if not args.dump:
            official = Path(args.official).resolve()
            new = Path(args.new).resolve()
            if official == new:
                self.error_exit("Official directory and new files directory are the same")
            if new in official.parents:
                self.error_exit("Official directory is inside the new files directory")
            if official in new.parents:
                self.error_exit("New files directory is inside the official directory")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams(
                official_dir=str(Path(args.official)),
                new_dir=str(Path(args.new)) if args.new is not None else None,
                enter_archives=args.enter_zip,
                follow_symlinks=args.follow_links,
                dump_only=args.dump,
                delete_all=args.delete_all,
                permanent=args.permanent,
                parallel=args.parallel,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def configure_logging(self) -> None:
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        elif self.quiet:
            logging.getLogger().setLevel(logging.ERROR)
        else:
            logging.getLogger().setLevel(logging.WARNING)

    def run_dump(self, command: DuplicateScanCommand, params: ScanParams) -> None:
        """Index the official directory and write it to stdout as CSV."""
        official, _ = command.execute(params)
        rows = ExportService.write_index_csv(official, sys.stdout)
        if self.verbose:
            print(command.official_stats.print_summary(), file=sys.stderr)
            print(f"{rows} rows written", file=sys.stderr)

    def run_compare(self, command: DuplicateScanCommand, params: ScanParams) -> DeletionPolicy:
        """Find the new files already present in the official directory and delete them."""
        if not self.quiet:
            print(f"Reading files under {params.official_dir}", file=sys.stderr)
            print(f"Reading files under {params.new_dir}", file=sys.stderr)
        official, new = command.execute(params)

        if self.verbose:
            print(command.official_stats.print_summary(), file=sys.stderr)
            print(command.new_stats.print_summary(), file=sys.stderr)
        if not self.quiet:
            print(f"Find duplicated files in {params.new_dir}", file=sys.stderr)

        policy = DeletionPolicy(
            delete_all=params.delete_all,
            permanent=params.permanent,
            prompt=self.prompt,
        )

        for decision in command.find_duplicates(official, new):
            self.output_decision(decision)
            if decision.verdict is MatchVerdict.DUPLICATE:
                self.duplicates += 1
                outcome = policy.apply(decision)
                if outcome is DeletionOutcome.STOPPED:
                    self.warning("End of input stream detected. Stopping.")
                    break
            elif decision.verdict is MatchVerdict.FALSE_POSITIVE:
                self.false_positives.append(decision)
            elif decision.verdict is MatchVerdict.UNKNOWN:
                self.unreadable += 1

        return policy

    def output_decision(self, decision: DuplicateDecision) -> None:
        """Print one fast-key hit with its candidates."""
        if self.quiet:
            return

        entry = decision.candidate
        if decision.verdict is MatchVerdict.UNKNOWN:
            self.warning(f"Could not read {entry.display_name}, skipped")
            return

        print(f"File {entry.display_name}")
        print(f"Size:{entry.size()} CRC32:{entry.full_fingerprint()} is duplicated at:")
        for other in decision.candidates:
            print(f" => {other.display_name}")
            try:
                print(f"Size:{other.size()} CRC32:{other.full_fingerprint()}")
            except ReadError:
                print("Size:? CRC32:? (unreadable)")

        if decision.anomalous:
            print("Uppss!!! It's not duplicated actually! (same size and first 64KB, different content)")

    def output_summary(self, policy: DeletionPolicy) -> None:
        if self.quiet:
            return
        print(f"\nDuplicated files: {self.duplicates}")
        print(f"Deleted: {len(policy.deleted)} ({ConvertUtils.bytes_to_human(policy.freed_bytes)} freed)")
        if policy.failed:
            print(f"Failed to delete {len(policy.failed)} file(s):")
            for path, error in policy.failed[:5]:  # Show first 5 errors
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if len(policy.failed) > 5:
                print(f"  ...and {len(policy.failed) - 5} more files")
        if self.false_positives:
            print(f"Fast key collisions (not duplicates): {len(self.false_positives)}")
        if self.unreadable:
            print(f"Unreadable files: {self.unreadable}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        self.validate_args(args)
        params = self.create_params(args)
        command = DuplicateScanCommand()

        if params.dump_only:
            self.run_dump(command, params)
            return

        policy = self.run_compare(command, params)
        self.output_summary(policy)

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
