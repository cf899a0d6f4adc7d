# wordcount/scheduler.py
"""
Multi-round merging of runs down to one.

Strategy
--------
- Input: the runs produced by the builder (any number, each sorted).
- Layered merging:
    round 0: split N runs into consecutive groups of size <= fanin, merge each group
    round 1: repeat on the newly produced runs (kept in group order)
    ...
  until exactly one run is left. That run is the result.
- A group's input runs are deleted as soon as that group's merge is done.
- With workers > 1 (and a store whose handles survive a process boundary),
  the groups of one round are merged in a process pool. The round boundary
  stays synchronous: the next round is planned only once every group is back.

Each round turns N runs into ceil(N / fanin), so fanin >= 2 finishes in
O(log_fanin N) rounds.
"""

from __future__ import annotations

import multiprocessing as mp
import sys
from typing import Iterator, List, Optional, Sequence

from wordcount.errors import ConfigurationError


def _chunks(xs: Sequence, n: int) -> Iterator[Sequence]:
    for i in range(0, len(xs), n):
        yield xs[i : i + n]


def _merge_group(entry):
    # entry = (merger, group) -> (merged handle, buffer peak seen in this process)
    merger, group = entry
    merged = merger.merge(group)
    return merged, merger.peak


class MergeScheduler:

    def __init__(self, merger, fanin: int, *, workers: int = 1, verbose: bool = False):
        if fanin < 2:
            raise ConfigurationError(f"fanin must be >= 2, got {fanin}")
        if workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        self.merger = merger
        self.store = merger.store
        self.fanin = fanin
        self.workers = workers
        self.verbose = verbose
        self.rounds = 0
        if workers > 1 and not getattr(self.store, "process_safe", False):
            print(
                f"[pmerge] warning: {type(self.store).__name__} cannot be shared with worker processes; merging sequentially",
                file=sys.stderr,
            )
            self.workers = 1

    def run(self, handles: Sequence) -> Optional[object]:
        """
        Merge `handles` down to a single run and return its handle.
        Zero runs -> None. One run -> returned as is, nothing is merged.
        """
        cur = list(handles)
        self.rounds = 0
        if not cur:
            return None

        while len(cur) > 1:
            groups = list(_chunks(cur, self.fanin))
            if self.verbose:
                print(
                    f"[pmerge] round {self.rounds} | inputs={len(cur)} | groups={len(groups)} | fanin={self.fanin} | workers={self.workers}",
                    file=sys.stderr,
                )
            if self.workers > 1 and len(groups) > 1:
                cur = self._round_parallel(groups)
            else:
                cur = self._round(groups)
            self.rounds += 1

        if self.verbose:
            print(f"[pmerge] done | rounds={self.rounds}", file=sys.stderr)
        return cur[0]

    def _round(self, groups: List[Sequence]) -> List:
        out = []
        for group in groups:
            merged = self.merger.merge(group)
            for h in group:
                self.store.delete(h)
            out.append(merged)
        return out

    def _round_parallel(self, groups: List[Sequence]) -> List:
        out = []
        tasks = [(self.merger, list(g)) for g in groups]
        with mp.Pool(processes=min(self.workers, len(groups))) as pool:
            # imap keeps group order; a worker exception is re-raised here
            for group, (merged, peak) in zip(groups, pool.imap(_merge_group, tasks, chunksize=1)):
                self.merger.note_peak(peak)
                self.store.adopt(merged)
                for h in group:
                    self.store.delete(h)
                out.append(merged)
        return out
