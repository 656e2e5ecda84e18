"""Tests for run_transformations.

Covers:
- sequential chaining vs parallel fan-in on a dependent pair
- cache transparency and cache hits skipping the stage
- dedup strategy applied first
- in_place semantics
- concurrency bound in parallel mode
- failure propagation (sequential and parallel)
- transform_options forwarded to stages
"""
from __future__ import annotations

import pytest

from conftest import (
    ConcurrencyTracker,
    FailingStage,
    OptionsRecorder,
    SlowStage,
    SuffixStage,
)

from ingestkit.core.schema import TextNode
from ingestkit.pipeline.cache import IngestionCache, get_transformation_hash
from ingestkit.pipeline.runner import run_transformations
from ingestkit.pipeline.strategies import DuplicatesStrategy
from ingestkit.providers.cache.memory import InMemoryCacheProvider


# ---------------------------------------------------------------------------
# Sequential vs parallel
# ---------------------------------------------------------------------------


async def test_sequential_chains_stages():
    nodes = [TextNode(text="x")]

    result = await run_transformations(nodes, [SuffixStage(suffix="a"), SuffixStage(suffix="b")])

    assert [n.text for n in result] == ["xab"]


async def test_parallel_feeds_every_stage_the_same_input():
    nodes = [TextNode(text="x")]

    result = await run_transformations(
        nodes,
        [SuffixStage(suffix="a"), SuffixStage(suffix="b")],
        num_workers=2,
    )

    assert [n.text for n in result] == ["xa", "xb"]


async def test_parallel_concatenates_in_declaration_order():
    tracker = ConcurrencyTracker()
    stages = [
        SlowStage(name="slow", delay=0.05, tracker=tracker),
        SlowStage(name="fast", delay=0.0, tracker=tracker),
    ]

    result = await run_transformations([TextNode(text="x")], stages, num_workers=2)

    assert [n.text for n in result] == ["x|slow", "x|fast"]


async def test_no_stages_returns_input():
    nodes = [TextNode(text="x")]
    assert await run_transformations(nodes, []) == nodes


async def test_invalid_worker_count():
    with pytest.raises(ValueError):
        await run_transformations([TextNode(text="x")], [SuffixStage()], num_workers=0)


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


async def test_cache_does_not_change_output(text_nodes):
    stages = [SuffixStage(suffix="a"), SuffixStage(suffix="b")]

    without = await run_transformations(list(text_nodes), stages)
    with_cache = await run_transformations(
        list(text_nodes), stages, cache=IngestionCache(provider=InMemoryCacheProvider())
    )

    assert [n.text for n in without] == [n.text for n in with_cache]


async def test_cache_hit_skips_stage(cache, text_nodes):
    stage = SuffixStage()

    first = await run_transformations(list(text_nodes), [stage], cache=cache)
    second = await run_transformations(list(text_nodes), [stage], cache=cache)

    assert stage.calls == 1
    assert [n.text for n in first] == [n.text for n in second]


async def test_cache_populated_per_stage(cache, text_nodes):
    first, second = SuffixStage(suffix="a"), SuffixStage(suffix="b")

    result = await run_transformations(list(text_nodes), [first, second], cache=cache)

    key_first = get_transformation_hash(text_nodes, first)
    stored = await cache.get(key_first)
    assert [n.text for n in stored] == ["alphaa", "betaa", "gammaa"]

    key_second = get_transformation_hash(stored, second)
    assert await cache.get(key_second) == result


async def test_parallel_mode_uses_cache(cache, text_nodes):
    stage_a, stage_b = SuffixStage(suffix="a"), SuffixStage(suffix="b")

    await run_transformations(list(text_nodes), [stage_a, stage_b], cache=cache, num_workers=2)
    await run_transformations(list(text_nodes), [stage_a, stage_b], cache=cache, num_workers=2)

    assert stage_a.calls == 1
    assert stage_b.calls == 1


async def test_changed_input_misses_cache(cache):
    stage = SuffixStage()

    await run_transformations([TextNode(text="one")], [stage], cache=cache)
    await run_transformations([TextNode(text="two")], [stage], cache=cache)

    assert stage.calls == 2


# ---------------------------------------------------------------------------
# Dedup + in_place
# ---------------------------------------------------------------------------


async def test_docstore_strategy_runs_before_stages(docstore):
    strategy = DuplicatesStrategy(docstore=docstore)
    nodes = [TextNode(text="same"), TextNode(text="same"), TextNode(text="other")]

    result = await run_transformations(nodes, [SuffixStage()], docstore_strategy=strategy)

    assert [n.text for n in result] == ["same!", "other!"]


async def test_not_in_place_leaves_input_list_untouched(docstore):
    strategy = DuplicatesStrategy(docstore=docstore)
    nodes = [TextNode(text="same"), TextNode(text="same")]

    await run_transformations(nodes, [], in_place=False, docstore_strategy=strategy)

    assert len(nodes) == 2


# ---------------------------------------------------------------------------
# Concurrency bound
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("workers", [2, 3])
async def test_parallel_respects_worker_limit(workers):
    tracker = ConcurrencyTracker()
    stages = [SlowStage(name=f"s{i}", tracker=tracker) for i in range(6)]

    result = await run_transformations([TextNode(text="x")], stages, num_workers=workers)

    assert tracker.peak == workers
    assert len(result) == 6


async def test_parallel_admission_is_fifo():
    tracker = ConcurrencyTracker()
    stages = [SlowStage(name=f"s{i}", tracker=tracker) for i in range(4)]

    await run_transformations([TextNode(text="x")], stages, num_workers=2)

    assert tracker.started == ["s0", "s1", "s2", "s3"]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


async def test_sequential_failure_stops_later_stages():
    later = SuffixStage()

    with pytest.raises(RuntimeError, match="boom"):
        await run_transformations(
            [TextNode(text="x")], [FailingStage(message="boom"), later]
        )

    assert later.calls == 0


async def test_parallel_failure_propagates_and_keeps_sibling_cache(cache):
    sibling = SuffixStage()
    nodes = [TextNode(text="x")]

    with pytest.raises(RuntimeError, match="boom"):
        await run_transformations(
            nodes, [sibling, FailingStage(message="boom")], cache=cache, num_workers=2
        )

    assert sibling.calls == 1
    assert await cache.get(get_transformation_hash(nodes, sibling)) is not None


async def test_transform_options_forwarded():
    recorder = OptionsRecorder()

    await run_transformations([TextNode(text="x")], [recorder], {"show_progress": True})

    assert recorder.seen == [{"show_progress": True}]
