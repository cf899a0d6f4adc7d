"""
End-to-end counting: tokens -> runs -> merged rounds -> one sorted run.

count_tokens() works against any run store and leaves the result run in it.
count_file() is the on-disk driver used by the CLI: temp runs in a
DiskRunStore, final run moved to the output path.
"""

from __future__ import annotations

import sys
from typing import Iterable, NamedTuple, Optional

from wordcount import profkit
from wordcount.build_runs import RunBuilder
from wordcount.config import CountConfig
from wordcount.merger import KWayMerger
from wordcount.parser import iter_tokens
from wordcount.paths import OUTPUT_PATH
from wordcount.runstore import DiskRunStore
from wordcount.scheduler import MergeScheduler


class CountResult(NamedTuple):
    handle: Optional[object]   # final run, None for empty input
    runs: int                  # runs written by the builder
    rounds: int                # merge rounds performed
    tokens: int                # non-blank tokens counted
    table_peak: int            # max distinct tokens in the builder table
    buffer_peak: int           # max distinct tokens in the merge buffer


def count_tokens(
    tokens: Iterable[str],
    store,
    config: CountConfig,
    *,
    workers: int = 1,
    verbose: bool = False,
) -> CountResult:
    builder = RunBuilder(store, config.max_words_in_memory, verbose=verbose)
    merger = KWayMerger(store, config.buffer_size, verbose=verbose)
    scheduler = MergeScheduler(merger, config.fanin, workers=workers, verbose=verbose)

    with profkit.timeit("build_runs"):
        handles = builder.build(tokens)
    with profkit.timeit("merge"):
        final = scheduler.run(handles)

    return CountResult(
        handle=final,
        runs=len(handles),
        rounds=scheduler.rounds,
        tokens=builder.tokens_seen,
        table_peak=builder.table.peak,
        buffer_peak=merger.peak,
    )


def count_file(
    input_path: str,
    config: CountConfig,
    output_path: str = OUTPUT_PATH,
    *,
    mode: str = "line",
    fix_text: bool = False,
    tmpdir: Optional[str] = None,
    workers: int = 1,
    verbose: bool = False,
) -> CountResult:
    """
    Count `input_path` and write the sorted token<TAB>count file to `output_path`.
    Empty input writes an empty file. Temp runs left by a failure are removed.
    """
    with DiskRunStore(tmpdir) as store:
        result = count_tokens(
            iter_tokens(input_path, mode=mode, fix_text=fix_text),
            store,
            config,
            workers=workers,
            verbose=verbose,
        )
        store.export(result.handle, output_path)
    if verbose:
        print(
            f"[wordcount] {result.tokens:,} tokens -> {output_path}  runs={result.runs} rounds={result.rounds}",
            file=sys.stderr,
        )
    return result
