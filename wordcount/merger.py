# wordcount/merger.py
"""
K-way merger for sorted count runs.

Merges up to `fanin` runs (each yields (token, count) in strictly ascending
token order) into ONE new run in the same format, summing the counts of a
token that shows up in several inputs.

Memory
- Heap:   one entry per open run.
- Buffer: a FrequencyTable of at most `buffer_size` distinct tokens. When a
  new token arrives and the buffer is full, the buffer is written out first.

Why a token is never split: the heap always pops the smallest token left
across all runs, so every copy of a token is popped back to back. By the time
a different token forces a flush, the previous token's sum is already final.

Complexity
- Time:  O(TotalRecords * log K) where K is the number of runs.
"""

from __future__ import annotations

import heapq
import sys
from typing import List, Optional, Sequence, Tuple

from wordcount.paths import MERGED_PREFIX
from wordcount.table import FrequencyTable, spill


def merge_runs(
    handles: Sequence,
    store,
    buffer_size: int,
    *,
    buffer: Optional[FrequencyTable] = None,
    verbose: bool = False,
):
    """
    Merge `handles` into a new run of `store` and return its handle.

    Args:
        handles: runs to merge; each must be sorted by token and duplicate-free.
        store: run store that owns the handles (see wordcount.runstore).
        buffer_size: max distinct tokens held before a sort-and-write pass.
        buffer: optional table to aggregate into (lets the caller read `.peak`).

    Inputs are NOT deleted here; the scheduler does that once the merge returns.
    """
    if buffer is None:
        buffer = FrequencyTable(buffer_size)

    readers = []
    try:
        for h in handles:
            readers.append(store.open(h))

        # Min-heap of (token, src_idx, count); src_idx breaks ties between runs
        heap: List[Tuple[str, int, int]] = []

        # Prime the heap with the first record from each run
        for i, r in enumerate(readers):
            rec = r.read_next()
            if rec is not None:
                heap.append((rec[0], i, rec[1]))
        heapq.heapify(heap)

        out = store.create(MERGED_PREFIX)
        consumed = 0
        with store.writer(out) as w:
            while heap:
                token, src, count = heapq.heappop(heap)

                # New token and no room left -> write out what we have
                if buffer.needs_room(token):
                    spill(buffer, w)
                buffer.add(token, count)
                consumed += 1

                # Advance the source run
                rec = readers[src].read_next()
                if rec is not None:
                    heapq.heappush(heap, (rec[0], src, rec[1]))

            if len(buffer):
                spill(buffer, w)
            written = w.records
    finally:
        for r in readers:
            r.close()
        # a failed merge must not leave partial sums for the next one
        buffer.clear()

    if verbose:
        print(f"[merger] merged {len(readers)} runs  consumed={consumed:,}  written={written:,}", file=sys.stderr)
    return out


class KWayMerger:
    """
    Thin OO wrapper around merge_runs().

    Reuses one output buffer across merges so `peak` reports the largest
    buffer seen over the whole job.
    """

    def __init__(self, store, buffer_size: int, *, verbose: bool = False):
        self.store = store
        self.buffer_size = buffer_size
        self.verbose = verbose
        self.buffer = FrequencyTable(buffer_size)

    @property
    def peak(self) -> int:
        return self.buffer.peak

    def note_peak(self, peak: int) -> None:
        """Fold in the buffer peak of a merge that ran in another process."""
        if peak > self.buffer.peak:
            self.buffer.peak = peak

    def merge(self, handles: Sequence):
        return merge_runs(
            handles,
            self.store,
            self.buffer_size,
            buffer=self.buffer,
            verbose=self.verbose,
        )
