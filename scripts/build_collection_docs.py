#!/usr/bin/env python3
"""Build the collections documentation data set from a docs tree.

Reads the interface / collection / method manifests and documents under
``--docs-root``, resolves inheritance and mixins, cross-indexes methods
against collections, assembles the search index, and writes
``interfaces.json``, ``collections.json``, ``methods.json``, ``search.json``
(plus ``search.jsonl`` and a build manifest) into ``--output``.

Nothing is written unless the whole build succeeds.

Usage:
    python3 scripts/build_collection_docs.py \
        --docs-root docs/ \
        --output build/docs-data

    # From a JSON config file, overriding the output dir:
    python3 scripts/build_collection_docs.py \
        --config docs-build.json --output /tmp/docs-data --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from collectiondocs.config import BuildConfig
from collectiondocs.doc_types import DocsBuildError
from collectiondocs.loader import DocumentLoader
from collectiondocs.pipeline import build_documentation, write_outputs
from collectiondocs.rendering import make_renderer
from collectiondocs.run_manifest import (
    build_manifest,
    generate_run_id,
    git_commit_hash,
    write_manifest,
)

log = logging.getLogger("build_collection_docs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve a collections documentation tree into JSON data files.",
    )
    parser.add_argument(
        "--docs-root",
        type=Path,
        default=None,
        help="Docs root holding interfaces.yaml, collections.yaml, methods.yaml",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory for the JSON data files",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON build config; flags override its values",
    )
    parser.add_argument(
        "--no-highlight",
        action="store_true",
        help="Render fenced code blocks without Pygments highlighting",
    )
    parser.add_argument(
        "--no-jsonl",
        action="store_true",
        help="Skip writing search.jsonl",
    )
    parser.add_argument(
        "--no-manifest",
        action="store_true",
        help="Skip writing the build manifest",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print record counts as JSON to stdout",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> BuildConfig:
    if args.config is not None:
        config = BuildConfig.from_json(args.config)
        config = config.with_overrides(docs_root=args.docs_root, output_dir=args.output)
    else:
        if args.docs_root is None or args.output is None:
            raise ValueError("--docs-root and --output are required without --config")
        config = BuildConfig(docs_root=args.docs_root, output_dir=args.output)
    return config.with_overrides(
        highlight=False if args.no_highlight else None,
        write_jsonl=False if args.no_jsonl else None,
        write_manifest=False if args.no_manifest else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if not config.docs_root.is_dir():
        print(f"ERROR: docs root not found: {config.docs_root}", file=sys.stderr)
        return 1

    run_id = generate_run_id()
    log.info("Run %s: building from %s", run_id, config.docs_root)
    try:
        build = build_documentation(
            DocumentLoader(config.docs_root),
            render=make_renderer(highlight=config.highlight),
        )
    except DocsBuildError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        write_outputs(build, config.output_dir, jsonl=config.write_jsonl)
        if config.write_manifest:
            manifest = build_manifest(
                run_id=run_id,
                build=build,
                docs_root=config.docs_root,
                output_dir=config.output_dir,
                git_commit=git_commit_hash(search_from=config.docs_root),
                config=config.to_dict(),
            )
            canonical, _ = write_manifest(config.output_dir, manifest)
            log.info("Manifest: %s", canonical)
    except OSError as exc:
        print(f"ERROR: writing outputs to {config.output_dir} failed: {exc}", file=sys.stderr)
        return 1

    if args.summary:
        sys.stdout.write(orjson.dumps(build.stats, option=orjson.OPT_SORT_KEYS).decode() + "\n")
    print(f"Output: {config.output_dir}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
