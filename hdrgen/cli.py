"""CLI entrypoints for hdrgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, build_engine, load_manifest
from .errors import HdrgenError, ValidationErrors
from .logging import configure_logging
from .writer import HeaderWriter


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Sub-parsers suppress their defaults so a flag given before the command survives.
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Log every registration, assignment and render step.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _add_manifest_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "manifest",
        nargs="?",
        default=".",
        help="Path to hdrgen.yml or its directory (defaults to current directory).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Directory receiving the headers (overrides options.output_dir).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdrgen",
        description="Generate C/C++ headers that share declarations without redefinition.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Render every header in the manifest and write the changed ones.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    _add_manifest_argument(generate_parser)
    _add_output_option(generate_parser)
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview header changes without writing.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate the manifest and report headers that are out of date.",
    )
    _add_logging_options(check_parser, suppress_default=True)
    _add_manifest_argument(check_parser)
    _add_output_option(check_parser)

    show_parser = subparsers.add_parser(
        "show",
        help="Print one rendered header to stdout.",
    )
    _add_logging_options(show_parser, suppress_default=True)
    show_parser.add_argument("manifest", help="Path to hdrgen.yml or its directory.")
    show_parser.add_argument("header", help="Header name as registered in the manifest.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hdrgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        manifest = load_manifest(Path(args.manifest))
        engine = build_engine(manifest)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    except (HdrgenError, ValueError) as exc:
        parser.exit(1, f"hdrgen: invalid manifest: {exc}\n")

    if args.command == "show":
        try:
            text = engine.emit(args.header)
        except HdrgenError as exc:
            parser.exit(1, f"{exc}\n")
        sys.stdout.write(text)
        return

    try:
        rendered = engine.emit_all()
    except ValidationErrors as exc:
        parser.exit(1, f"{exc}\n")

    output_dir = _resolve_output_dir(args.output_dir, manifest.output_dir, manifest.root)
    writer = HeaderWriter(output_dir)

    if args.command == "check":
        try:
            stale = writer.stale(rendered)
        except (OSError, ValueError) as exc:
            parser.exit(1, f"hdrgen check failed: {exc}\n")
        if stale:
            listing = "\n".join(f"  - {_relativize(path)}" for path in stale)
            parser.exit(1, f"{len(stale)} header(s) out of date:\n{listing}\n")
        print(f"{len(rendered)} header(s) valid and up to date")
    elif args.command == "generate":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcomes = writer.write_all(rendered, dry_run=dry_run)
        except (OSError, ValueError) as exc:
            parser.exit(1, f"hdrgen generate failed: {exc}\n")
        changed = [outcome for outcome in outcomes if outcome.changed]
        if dry_run:
            print("Header changes (dry-run):" if changed else "Headers already up to date (dry-run)")
            for outcome in changed:
                print(outcome.diff or "(no diff)")
        elif not changed:
            print("Headers already up to date")
        else:
            for outcome in changed:
                print(f"Header written at {_relativize(outcome.path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _resolve_output_dir(option: str | None, configured: Path | None, root: Path) -> Path:
    if option:
        return Path(option)
    if configured is not None:
        return configured
    return root / "include"


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
