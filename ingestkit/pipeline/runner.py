"""
================================================================================
FILE: ingestkit/pipeline/runner.py
================================================================================

PURPOSE:
    Apply an ordered list of transformation stages to a node batch, with
    per-stage result caching and an optional parallel mode.

WORKFLOW:
    1. Copy the input list (unless in_place)
    2. Run the dedup strategy stage, if any (never cached)
    3. num_workers == 1: stages run in list order, each consuming the
       previous stage's output
       num_workers  > 1: every stage consumes the same (deduplicated) input,
       at most num_workers at a time; outputs are concatenated in
       declaration order
    4. For every stage: fingerprint -> cache hit returns stored output,
       miss runs the stage and stores its output

KEY FACTS:
    - Parallel mode is only valid for independent stages
    - Stage failures propagate unchanged; in parallel mode siblings are not
      cancelled and any cache entries they already wrote remain
    - No locking: concurrent writes for one fingerprint are last-writer-wins
================================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from ingestkit.config.constants import DEFAULT_NUM_WORKERS
from ingestkit.core.schema import BaseNode
from ingestkit.core.transform import TransformComponent
from ingestkit.pipeline.cache import IngestionCache, get_transformation_hash

logger = logging.getLogger(__name__)


async def _apply_transform(
    nodes: List[BaseNode],
    transform: TransformComponent,
    cache: Optional[IngestionCache],
    transform_options: Dict[str, Any],
) -> List[BaseNode]:
    """Run one stage, consulting the cache first."""
    if cache is None:
        return await transform.acall(nodes, **transform_options)

    key = get_transformation_hash(nodes, transform)
    cached_nodes = await cache.get(key)
    if cached_nodes is not None:
        logger.debug(f"Cache hit for {transform.class_name()} ({key[:12]})")
        return cached_nodes

    logger.debug(f"Cache miss for {transform.class_name()} ({key[:12]})")
    result = await transform.acall(nodes, **transform_options)
    await cache.put(key, result)
    return result


async def run_transformations(
    nodes: Sequence[BaseNode],
    transformations: Sequence[TransformComponent],
    transform_options: Optional[Dict[str, Any]] = None,
    *,
    in_place: bool = True,
    cache: Optional[IngestionCache] = None,
    docstore_strategy: Optional[TransformComponent] = None,
    num_workers: int = DEFAULT_NUM_WORKERS,
) -> List[BaseNode]:
    """
    Run a series of transformations on a set of nodes.

    Args:
        nodes: Input nodes
        transformations: Stages, in order
        transform_options: Extra keyword arguments passed to every stage
        in_place: When False the input list is copied before processing
        cache: Result cache (None disables caching)
        docstore_strategy: Dedup stage applied once before the stages
        num_workers: 1 for sequential mode; > 1 for the parallel mode

    Returns:
        Transformed nodes
    """
    if num_workers < 1:
        raise ValueError(f"num_workers must be >= 1, got {num_workers}")

    options = dict(transform_options or {})
    if in_place and isinstance(nodes, list):
        current = nodes
    else:
        current = list(nodes)

    if docstore_strategy is not None:
        current = await docstore_strategy.acall(current, **options)

    if num_workers > 1:
        semaphore = asyncio.Semaphore(num_workers)

        async def _bounded(transform: TransformComponent) -> List[BaseNode]:
            async with semaphore:
                return await _apply_transform(current, transform, cache, options)

        results = await asyncio.gather(*(_bounded(t) for t in transformations))
        return [node for result in results for node in result]

    for transform in transformations:
        current = await _apply_transform(current, transform, cache, options)

    return current
