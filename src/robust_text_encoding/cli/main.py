"""Main CLI entry point for the robust-text-encoding command-line tool.

Provides ``detect`` to report the encoding of files and ``fix`` to rewrite
Latin-1 and Windows-1252 files as UTF-8.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from robust_text_encoding import __version__
from robust_text_encoding.api import EncodingFixer
from robust_text_encoding.character.encoding import EncodingError, EncodingTag, scan_bytes
from robust_text_encoding.shared.config import ConfigError, EncodingConfig
from robust_text_encoding.shared.logging import get_logger

DEFAULT_PATTERN = "*"
DEFAULT_SUFFIX = "_fixed"


def find_files(path: Path, pattern: str = DEFAULT_PATTERN, recursive: bool = False) -> Iterator[Path]:
    """Find files to process.

    A file given directly is always yielded; directories are searched with
    the glob pattern.
    """
    if path.is_file():
        yield path
    elif path.is_dir():
        matches = path.rglob(pattern) if recursive else path.glob(pattern)
        for candidate in sorted(matches):
            if candidate.is_file():
                yield candidate


def collect_sources(
    paths: List[Path], pattern: str, recursive: bool
) -> List[Tuple[Path, Path]]:
    """Expand paths into de-duplicated (file, input path) pairs, keeping order."""
    seen = set()
    sources = []
    for path in paths:
        for file_path in find_files(path, pattern, recursive):
            if file_path not in seen:
                seen.add(file_path)
                sources.append((file_path, path))
    return sources


def collect_files(paths: List[Path], pattern: str, recursive: bool) -> List[Path]:
    """Expand paths into a de-duplicated list of files, keeping order."""
    return [file_path for file_path, _ in collect_sources(paths, pattern, recursive)]


class FileProcessor:
    """Detection and repair of individual files."""

    def __init__(self, config: EncodingConfig, forced_encoding: Optional[EncodingTag] = None):
        self.config = config
        self.forced_encoding = forced_encoding
        self.fixer = EncodingFixer(config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def detect_file(self, file_path: Path) -> Dict[str, Any]:
        """Detect the encoding of one file."""
        try:
            data = file_path.read_bytes()
            tag = self.fixer.detect(data)
            scan = scan_bytes(data)
            return {
                "file": str(file_path),
                "success": True,
                "encoding": tag.label if tag else None,
                "size": len(data),
                "high_bytes": scan.high_byte_count,
                "windows1252_specific": sum(scan.windows1252_specific.values()),
                "latin1_range": sum(scan.latin1_range.values()),
            }
        except (OSError, EncodingError) as e:
            self.logger.exception("Failed to detect file encoding", extra={"file": str(file_path)})
            return {"file": str(file_path), "success": False, "error": str(e)}

    def fix_file(self, file_path: Path, output_path: Path) -> Dict[str, Any]:
        """Rewrite one file as UTF-8 when its encoding can be repaired."""
        try:
            data = file_path.read_bytes()
            if self.forced_encoding:
                result = self.fixer.fix_as_with_report(self.forced_encoding, data)
            else:
                result = self.fixer.fix_with_report(data)

            record: Dict[str, Any] = {
                "file": str(file_path),
                "success": True,
                "encoding": result.encoding.label if result.encoding else None,
                "replacements": result.replacement_count,
                "substitutions": result.substitutions,
                "written": None,
            }

            if result.detected and result.changed:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_bytes(result.text.encode("utf-8"))
                record["written"] = str(output_path)
            return record
        except (OSError, EncodingError) as e:
            self.logger.exception("Failed to fix file encoding", extra={"file": str(file_path)})
            return {"file": str(file_path), "success": False, "error": str(e)}


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="robust-text-encoding",
        description="Detect and repair Latin-1 / Windows-1252 text as UTF-8"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet output")
    parser.add_argument("--config", "-c", type=Path, help="JSON configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_selection_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("paths", nargs="+", type=Path, help="Files or directories")
        sub.add_argument(
            "--pattern", "-p",
            default=DEFAULT_PATTERN,
            help=f"Glob pattern for files inside directories (default: {DEFAULT_PATTERN})"
        )
        sub.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Recursively search directories"
        )

    detect_parser = subparsers.add_parser("detect", help="Report file encodings")
    add_selection_args(detect_parser)
    detect_parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        default="text",
        help="Output format (default: text)"
    )
    detect_parser.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")

    fix_parser = subparsers.add_parser("fix", help="Rewrite files as UTF-8")
    add_selection_args(fix_parser)
    fix_parser.add_argument(
        "--encoding", "-e",
        help="Decode as this encoding instead of detecting it"
    )
    fix_parser.add_argument(
        "--fallback-char",
        help="Character substituted for unmappable bytes (default: U+FFFD)"
    )
    fix_parser.add_argument("--output-dir", "-d", type=Path, help="Directory for repaired files")
    fix_parser.add_argument(
        "--suffix",
        default=DEFAULT_SUFFIX,
        help=f"Suffix for repaired files (default: {DEFAULT_SUFFIX})"
    )
    fix_parser.add_argument(
        "--in-place",
        action="store_true",
        help="Overwrite the original files"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format detection results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if format_type == "csv":
        if not results:
            return ""
        lines = ["file,encoding,size,high_bytes,error"]
        for result in results:
            lines.append(
                f"{result['file']},{result.get('encoding') or ''},{result.get('size', 0)},"
                f"{result.get('high_bytes', 0)},{result.get('error', '')}"
            )
        return "\n".join(lines)

    if not results:
        return "No files to display."

    lines = []
    for result in results:
        if not result.get("success", False):
            lines.append(f"✗ {result['file']}: {result.get('error', 'failed')}")
        else:
            encoding = result.get("encoding") or "unknown"
            lines.append(f"{result['file']}: {encoding} ({result['high_bytes']} high bytes)")
    return "\n".join(lines)


def load_config(args: argparse.Namespace) -> EncodingConfig:
    """Build the encoding configuration from the config file and flags."""
    config = EncodingConfig.from_file(args.config) if args.config else EncodingConfig()
    overrides: Dict[str, Any] = {}
    if args.verbose:
        overrides["verbose"] = True
    if getattr(args, "fallback_char", None) is not None:
        overrides["fallback_char"] = args.fallback_char
    return config.override(**overrides) if overrides else config


def output_path_for(
    file_path: Path, args: argparse.Namespace, root: Optional[Path] = None
) -> Path:
    """Where the repaired copy of file_path is written.

    Under an output directory, files found inside an input directory keep
    their path relative to that directory.
    """
    if args.in_place:
        return file_path
    name = f"{file_path.stem}{args.suffix}{file_path.suffix}"
    if args.output_dir is None:
        return file_path.parent / name
    if root is not None and root.is_dir():
        return args.output_dir / file_path.relative_to(root).parent / name
    return args.output_dir / name


def cmd_detect(args: argparse.Namespace, config: EncodingConfig) -> int:
    """Handle detect command."""
    processor = FileProcessor(config)
    files = collect_files(args.paths, args.pattern, args.recursive)
    results = [processor.detect_file(file_path) for file_path in files]

    formatted_output = format_results(results, args.format)
    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def cmd_fix(args: argparse.Namespace, config: EncodingConfig) -> int:
    """Handle fix command."""
    forced = EncodingTag.from_name(args.encoding) if args.encoding else None
    processor = FileProcessor(config, forced_encoding=forced)
    sources = collect_sources(args.paths, args.pattern, args.recursive)
    if not sources:
        print("No files found", file=sys.stderr)
        return 1

    failures = 0
    fixed = 0
    claimed: Dict[Path, Path] = {}
    for file_path, root in sources:
        output_path = output_path_for(file_path, args, root)
        if output_path in claimed:
            failures += 1
            print(
                f"Failed to fix {file_path}: output {output_path} "
                f"already used for {claimed[output_path]}",
                file=sys.stderr
            )
            continue
        claimed[output_path] = file_path

        result = processor.fix_file(file_path, output_path)
        if not result["success"]:
            failures += 1
            print(f"Failed to fix {file_path}: {result['error']}", file=sys.stderr)
        elif result["written"]:
            fixed += 1
            if not args.quiet:
                print(f"Fixed ({result['encoding']}): {file_path} -> {result['written']}")
        elif not args.quiet:
            reason = "already UTF-8" if result["encoding"] else "encoding not determined"
            print(f"Unchanged ({reason}): {file_path}")

    if not args.quiet:
        print(f"Fixed {fixed} of {len(sources)} files", file=sys.stderr)
    return 0 if failures == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.INFO)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        config = load_config(args)
        if args.command == "detect":
            return cmd_detect(args, config)
        if args.command == "fix":
            return cmd_fix(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except (ConfigError, EncodingError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
