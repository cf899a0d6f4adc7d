# wordcount/build_runs.py
"""
Build sorted count runs from a token stream (spill driver).

Per token:
  1) Count it in a bounded FrequencyTable.
  2) When the table holds `capacity` distinct tokens, flush it:
     sort by token, write (token, count) records as a new run, clear.

At end of input the remaining (partial) table is flushed once more.

Each run is sorted and duplicate-free on its own. Runs may share tokens;
wordcount.merger and wordcount.scheduler sum them up later.
"""

from __future__ import annotations

import sys
from typing import Iterable, List

from wordcount.paths import RUN_PREFIX
from wordcount.table import FrequencyTable, spill


class RunBuilder:
    """
    Consumes tokens once and spills them into runs of `store`.

    The table is owned by the builder and exposed as `self.table` so callers
    can check `table.peak` after a build.
    """

    def __init__(self, store, capacity: int, *, verbose: bool = False):
        self.store = store
        self.capacity = capacity
        self.verbose = verbose
        self.table = FrequencyTable(capacity)
        self.tokens_seen = 0

    def build(self, tokens: Iterable[str]) -> List:
        """
        Returns
        -------
        List
            Run handles in creation order. Empty input gives [].
        """
        table = self.table
        run_handles: List = []

        def flush():
            if not len(table):
                return
            handle = self.store.create(RUN_PREFIX)
            with self.store.writer(handle) as w:
                n_rows = spill(table, w)
            run_handles.append(handle)
            if self.verbose:
                print(f"[BuildRuns] Wrote run #{len(run_handles)}  rows={n_rows}", file=sys.stderr)

        for token in tokens:
            if not token:
                continue
            self.tokens_seen += 1
            table.add(token)
            if table.is_full():
                flush()

        # Flush the final (possibly partial) table
        flush()

        if self.verbose:
            print(f"[BuildRuns] Total runs: {len(run_handles)}  tokens={self.tokens_seen:,}", file=sys.stderr)
        return run_handles


def build_runs(tokens: Iterable[str], store, capacity: int, *, verbose: bool = False) -> List:
    """Convenience wrapper: RunBuilder(store, capacity).build(tokens)."""
    return RunBuilder(store, capacity, verbose=verbose).build(tokens)
