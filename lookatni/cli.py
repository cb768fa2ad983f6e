"""CLI entrypoints for lookatni commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from .codec import MarkerCodec
from .config import ConfigError, LookatniConfig, load_config
from .logging import configure_logging
from .markers import PRESETS, FrontmatterError, InvalidConfig
from .models import ExtractOptions, ParseResult
from .packer import Packer


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lookatni",
        description="Pack directories into marked text artifacts and extract them again.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .lookatni.yml or the directory holding it (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Pack a directory into a marked artifact.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument("source", help="Directory to pack.")
    generate_parser.add_argument("output", help="Artifact file to write.")
    generate_parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Glob or substring to exclude (repeatable).",
    )
    generate_parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Marker preset; writes a frontmatter header instead of the classic one.",
    )
    generate_parser.add_argument(
        "--max-file-size",
        type=float,
        default=None,
        help="Skip files larger than this many KB (-1 disables the limit).",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Write the files of an artifact to a directory.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    extract_parser.add_argument("artifact", help="Artifact file to read.")
    extract_parser.add_argument("output_dir", help="Destination directory.")
    extract_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace files that already exist.",
    )
    extract_parser.add_argument(
        "--no-create-dirs",
        action="store_true",
        help="Do not create missing parent directories.",
    )
    extract_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be written without touching the filesystem.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that an artifact is well-formed.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    validate_parser.add_argument("artifact", help="Artifact file to check.")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Also flag marker-like lines that fail to parse.",
    )
    _add_json_option(validate_parser)

    parse_parser = subparsers.add_parser(
        "parse",
        help="List the files contained in an artifact.",
    )
    _add_verbose_option(parse_parser, suppress_default=True)
    parse_parser.add_argument("artifact", help="Artifact file to read.")
    _add_json_option(parse_parser)

    presets_parser = subparsers.add_parser(
        "presets",
        help="List the built-in marker presets.",
    )
    _add_verbose_option(presets_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lookatni commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        if args.command == "generate":
            _run_generate(parser, args, config)
        elif args.command == "extract":
            _run_extract(parser, args, config)
        elif args.command == "validate":
            _run_validate(parser, args, config)
        elif args.command == "parse":
            _run_parse(args)
        elif args.command == "presets":
            for key, preset in sorted(PRESETS.items()):
                print(f"{key:<10} {preset.name}: {preset.config.format_marker('<path>')!r}")
        elif args.command == "serve":
            from .service import run_service

            run_service(args.host, args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, InvalidConfig, FrontmatterError) as exc:
        parser.exit(1, f"lookatni {args.command} failed: {exc}\n")
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(1, f"lookatni {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: LookatniConfig
) -> None:
    max_size = args.max_file_size
    if max_size is None:
        max_size = config.generate.max_file_size_kb
    codec = MarkerCodec(
        packer=Packer(max_file_size_kb=max_size, skip_binary=config.generate.skip_binary)
    )
    excludes = [*config.generate.exclude, *args.exclude]
    result = codec.generate(
        args.source,
        args.output,
        excludes,
        config.marker_config(args.preset),
    )
    for skipped in result.skipped_files:
        print(f"skipped {skipped.path}: {skipped.reason}")
    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)
    print(f"Packed {result.total_files} files ({result.total_bytes} bytes) into {_relativize(Path(args.output))}")
    if not result.success:
        parser.exit(1, f"{len(result.errors)} files could not be packed\n")


def _run_extract(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: LookatniConfig
) -> None:
    options = ExtractOptions(
        overwrite=bool(args.overwrite) or config.extract.overwrite,
        create_dirs=config.extract.create_dirs and not args.no_create_dirs,
        dry_run=bool(args.dry_run),
    )
    result = MarkerCodec().extract(args.artifact, args.output_dir, options)
    for error in result.errors:
        print(error, file=sys.stderr)
    verb = "Would extract" if options.dry_run else "Extracted"
    print(f"{verb} {len(result.extracted_files)} files")
    if options.dry_run:
        for path in result.extracted_files:
            print(f"  {path}")
    if not result.success:
        parser.exit(1, "Extraction finished with write errors\n")


def _run_validate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: LookatniConfig
) -> None:
    strict = bool(args.strict) or config.validate.strict
    report = MarkerCodec().validate(args.artifact, strict=strict)
    if args.json:
        print(json.dumps(asdict(report), indent=2))
    else:
        status = "valid" if report.is_valid else "INVALID"
        stats = report.statistics
        print(f"{args.artifact}: {status} ({stats.total_markers} markers, {stats.empty_markers} empty)")
        for error in report.errors:
            print(f"  line {error.line}: [{error.severity}] {error.message}")
        if report.duplicate_filenames:
            print(f"  duplicates: {', '.join(report.duplicate_filenames)}")
        if report.invalid_filenames:
            print(f"  invalid filenames: {', '.join(report.invalid_filenames)}")
    if not report.is_valid:
        parser.exit(1)


def _run_parse(args: argparse.Namespace) -> None:
    parsed = MarkerCodec().parse(args.artifact)
    if args.json:
        print(json.dumps(_parse_payload(parsed), indent=2))
        return
    for record in parsed.records:
        print(f"{record.filename} ({record.size} bytes, lines {record.start_line}-{record.end_line})")
    for error in parsed.errors:
        print(f"line {error.line}: {error.message}", file=sys.stderr)
    print(f"{parsed.total_files} files, {parsed.total_bytes} bytes")


def _parse_payload(parsed: ParseResult) -> Dict[str, Any]:
    return {
        "totalMarkers": parsed.total_markers,
        "totalFiles": parsed.total_files,
        "totalBytes": parsed.total_bytes,
        "metadata": parsed.metadata,
        "errors": [asdict(error) for error in parsed.errors],
        "records": [asdict(record) for record in parsed.records],
    }


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
