# profkit.py: ultra-light counters and timers for the counting pipeline
# `from wordcount import profkit` then profkit.tick(...) / with profkit.timeit(...).
# Toggle via env var: set WORDCOUNT_PROF=1 to enable; otherwise it's a no-op with near-zero overhead.

import os
import sys
import time
from collections import defaultdict
from contextlib import contextmanager

ENABLED = os.getenv("WORDCOUNT_PROF", "0") == "1"
COUNTERS = defaultdict(float)  # str -> float (counts / milliseconds)

def tick(name: str, n: float = 1.0):
    if ENABLED:
        COUNTERS[name] += n

@contextmanager
def timeit(name: str):
    if not ENABLED:
        yield
        return
    t0 = time.perf_counter()
    try:
        yield
    finally:
        COUNTERS[name + "_ms"] += (time.perf_counter() - t0) * 1000.0

def reset():
    COUNTERS.clear()

def report(file=sys.stderr):
    for name in sorted(COUNTERS):
        print(f"[prof] {name:<24} {COUNTERS[name]:,.1f}", file=file)
