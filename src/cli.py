"""Command-line interface for autodef."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.errors import AutodefError
from artifacts.write import ALL_TARGETS, generate_all_artifacts
from contract.artifacts import ARTIFACT_SPECS
from rules.config import ConfigError, load_config, resolve_output_dir
from verify.verify import verify_up_to_date


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Workspace root (default: .)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="autodef")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate artifacts")
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--target",
        choices=[*ARTIFACT_SPECS, ALL_TARGETS],
        default=ALL_TARGETS,
        help="Artifact to generate (default: all)",
    )
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Regenerate even if the artifacts are up to date",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify that artifacts are up to date"
    )
    _add_common_paths(verify_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _handle_generate(root: Path, target: str, force: bool) -> int:
    results = generate_all_artifacts(root=root, target=target, force=force)
    for name, result in results.items():
        state = "generated" if result.rebuilt else "up to date"
        sys.stdout.write(f"{name}: {state} ({result.path})\n")
    return 0


def _handle_verify(root: Path) -> int:
    config = load_config(root)
    artifacts_dir = resolve_output_dir(root, config.output_dir)
    try:
        result = verify_up_to_date(root=root, artifacts_dir=artifacts_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    if not result.ok:
        for label, names in (
            ("missing", result.missing),
            ("mismatches", result.mismatches),
        ):
            for name in names:
                sys.stderr.write(f"{label}: {name}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args.target, args.force)

        if args.command == "verify":
            return _handle_verify(root)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2
    except AutodefError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
