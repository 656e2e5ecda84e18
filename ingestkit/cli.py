#!/usr/bin/env python3
"""
ingestkit command line.

    ingestkit ingest ./docs --strategy upserts --persist-dir ./storage

Reads every supported file under DIR, runs cleaner -> splitter -> embedding,
writes embedded text chunks and images to the per-modality vector stores
and persists the docstore, vector stores and cache so the next run only
processes changes.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from ingestkit.config.settings import Settings, get_settings
from ingestkit.container.service_container import ServiceContainer
from ingestkit.core.exceptions import IngestionPipelineException
from ingestkit.core.logging import setup_logging
from ingestkit.pipeline.ingestion import IngestionPipeline
from ingestkit.pipeline.strategies import DocStoreStrategy
from ingestkit.readers.directory import DirectoryReader
from ingestkit.transforms.chunking import SlidingWindowSplitter
from ingestkit.transforms.cleaning import TextCleaner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ingestkit", description="Document ingestion pipeline")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest a directory of documents")
    ingest.add_argument("input_dir", help="Directory to read")
    ingest.add_argument("--recursive", action="store_true", help="Descend into sub-directories")
    ingest.add_argument("--workers", dest="num_workers", type=int, help="Stage concurrency (1 = sequential)")
    ingest.add_argument(
        "--strategy",
        dest="docstore_strategy",
        choices=[s.value for s in DocStoreStrategy],
        help="Docstore dedup strategy",
    )
    ingest.add_argument("--no-cache", dest="no_cache", action="store_true", help="Disable the transformation cache")
    ingest.add_argument("--chunk-size", dest="chunk_size", type=int, help="Splitter window size (chars)")
    ingest.add_argument("--chunk-overlap", dest="chunk_overlap", type=int, help="Splitter window overlap (chars)")
    ingest.add_argument("--persist-dir", dest="persist_dir", help="Where pipeline state is stored")
    return parser


def settings_from_args(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    """Apply command line overrides on top of environment settings."""
    base = base or get_settings()
    overrides: Dict[str, Any] = {
        key: getattr(args, key)
        for key in ("num_workers", "docstore_strategy", "chunk_size", "chunk_overlap", "persist_dir")
        if getattr(args, key, None) is not None
    }
    if args.no_cache:
        overrides["cache_provider"] = "none"

    # re-validate the merged values
    data = base.model_dump()
    data.update(overrides)
    return Settings.model_validate(data)


async def run_ingest(args: argparse.Namespace, settings: Settings) -> List[Any]:
    container = ServiceContainer(settings, persist_dir=settings.persist_dir)
    await container.initialize()
    try:
        transformations = [
            TextCleaner(),
            SlidingWindowSplitter(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
            ),
            container.get_embeddings(),
        ]
        pipeline = IngestionPipeline.from_container(
            container,
            transformations,
            reader=DirectoryReader(args.input_dir, recursive=args.recursive),
        )
        nodes = await pipeline.run()
        container.persist()
        return nodes
    finally:
        await container.shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(settings)

    try:
        nodes = asyncio.run(run_ingest(args, settings))
    except (IngestionPipelineException, ValueError) as e:
        logger.error(f"Ingestion failed: {e}")
        print(f"Ingestion failed: {e}", file=sys.stderr)
        return 1

    embedded = sum(1 for node in nodes if node.embedding is not None)
    print(
        f"Ingested {args.input_dir}: {len(nodes)} nodes produced, {embedded} embedded "
        f"(strategy={settings.docstore_strategy}, state in {settings.persist_dir})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
