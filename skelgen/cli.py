"""
cli.py

Responsibility: CLI entrypoint for skelgen.

High-level flow:
1) Resolve the input: a skeleton directory, or a zip extracted to scratch
2) Load the descriptor -> `Descriptor`
3) Prompt for a value per declared parameter
4) Materialize the tree into the output directory
5) Report unresolved placeholders and per-entry failures
6) Remove the scratch directory (archives only)

This module should orchestrate behavior but keep concerns isolated:
- Archives and scratch lifetime: `archive.py`
- Descriptor parsing: `descriptor.py`
- Prompting: `prompt.py`
- Tree walk and substitution: `materializer.py`, `substitutor.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TextIO

from skelgen import __version__
from skelgen.archive import open_skeleton
from skelgen.descriptor import Descriptor, load_descriptor
from skelgen.errors import CLIError, SkelgenError
from skelgen.materializer import MaterializeResult, Skeleton, materialize
from skelgen.prompt import collect_values
from skelgen.substitutor import placeholder

DEFAULT_OUT = "./__out/"
OUT_ENV = "SKELGEN_OUT"

DESCRIPTION = """\
Generates directories, files and contents based on a 'skeleton' structure.
All values in the form of ${x} are substituted, in directory/file names,
but also in content of files. The values for these variables are requested
on the standard input when a correct skeleton input is specified."""

logger = logging.getLogger("skelgen")


def _attach_log_handler(verbose: bool) -> logging.Handler:
    """Route the `skelgen` loggers to the current stderr for one run."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    return handler


def _check_input(raw: str | None) -> Path:
    if not raw:
        raise CLIError("No skeleton specified.")
    path = Path(raw)
    try:
        path.stat()
    except OSError as e:
        raise CLIError(f"Unable to open input directory or file '{raw}': {e}") from e
    return path


def _print_descriptor(descriptor: Descriptor, *, verbose: bool, out: TextIO) -> None:
    print(file=out)
    print(descriptor.name, file=out)
    print(f"{descriptor.description}\n", file=out)
    print(f"{len(descriptor.parameters)} configurable parameter(s) defined:", file=out)
    if verbose:
        for param in descriptor.parameters:
            print(f"  {placeholder(param.name)}: {param.description}", file=out)


def _print_report(result: MaterializeResult, *, dry_run: bool, out: TextIO) -> None:
    if dry_run:
        print("\nPlanned actions (dry-run):\n", file=out)
        for path in result.directories:
            print(f"  mkdir  {path}", file=out)
        for path in result.files:
            print(f"  write  {path}", file=out)

    if result.unresolved:
        print("\nWarning: the following variables were left unsubstituted:\n", file=out)
        for item in sorted(result.unresolved):
            print(f"\t{item}", file=out)

    if result.failures:
        print(f"\nWarning: {len(result.failures)} entr(ies) could not be materialized:\n", file=out)
        for failure in result.failures:
            print(f"\t{failure.source}: {failure.reason}", file=out)


def run(args: argparse.Namespace, *, stdin: TextIO, stdout: TextIO) -> int:
    src = _check_input(args.input)
    print(f"Opening skeleton '{src}'", file=stdout)
    if args.dry:
        print("This run will not have any effect (dry-run)!", file=stdout)

    with open_skeleton(src) as root:
        descriptor = load_descriptor(root)
        _print_descriptor(descriptor, verbose=args.verbose, out=stdout)

        values = collect_values(descriptor.parameters, stdin=stdin, stdout=stdout)
        skeleton = Skeleton(
            root=root,
            descriptor=descriptor,
            output_dir=Path(args.out),
            values=values,
            dry_run=bool(args.dry),
            verbose=bool(args.verbose),
            unique_subdir=not bool(args.no_subdir),
        )
        result = materialize(skeleton)

    _print_report(result, dry_run=skeleton.dry_run, out=stdout)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="skelgen",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-i", "--in", dest="input", default="", help="Input skeleton directory or zip file")
    p.add_argument(
        "-o",
        "--out",
        default=os.environ.get(OUT_ENV) or DEFAULT_OUT,
        help=f"Output directory with the generated structure (default: ${OUT_ENV} or {DEFAULT_OUT})",
    )
    p.add_argument("--dry", action="store_true", help="Initiate a dry run (i.e. do not create files/dirs)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    p.add_argument(
        "--no-subdir",
        action="store_true",
        help="Write directly into the output directory instead of a unique <name>-<timestamp> sub-directory",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    handler = _attach_log_handler(bool(args.verbose))
    try:
        return run(args, stdin=stdin or sys.stdin, stdout=stdout or sys.stdout)
    except SkelgenError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


if __name__ == "__main__":
    raise SystemExit(main())
