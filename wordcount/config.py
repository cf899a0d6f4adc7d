from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from wordcount.errors import ConfigurationError

_BOUND_RE = re.compile(r"[0-9]+", re.ASCII)


def _check_int(name: str, value: Any, minimum: int) -> int:
    # bool is an int subclass; "True" is not a memory bound
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class CountConfig:
    """Memory bounds for one counting job.

    ``max_words_in_memory`` is the only required value. The merge fan-in and
    the merge output buffer default to it, so a bare ``CountConfig(B)`` keeps
    the one-knob behaviour; they can be tuned separately when needed.
    A fan-in of 1 can never reduce the run count, so the default is raised
    to 2 when B is 1.
    """

    max_words_in_memory: int
    fanin: Optional[int] = None
    buffer_size: Optional[int] = None

    def __post_init__(self):
        b = _check_int("max_words_in_memory", self.max_words_in_memory, 1)
        if self.fanin is None:
            object.__setattr__(self, "fanin", max(b, 2))
        else:
            _check_int("fanin", self.fanin, 2)
        if self.buffer_size is None:
            object.__setattr__(self, "buffer_size", b)
        else:
            _check_int("buffer_size", self.buffer_size, 1)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_args(args) -> "CountConfig":
        """Build from an argparse namespace (see wordcount.cli)."""
        return CountConfig(
            max_words_in_memory=args.max_words_in_memory,
            fanin=getattr(args, "fanin", None),
            buffer_size=getattr(args, "buffer_size", None),
        )

    @staticmethod
    def parse_bound(raw: str) -> int:
        """Parse the positional memory bound the way the CLI receives it."""
        # plain decimal digits only: no sign, spaces or "1_000"
        if not isinstance(raw, str) or not _BOUND_RE.fullmatch(raw):
            raise ConfigurationError(f"Invalid MAX_WORDS_IN_MEMORY: {raw}")
        value = int(raw)
        if value <= 0:
            raise ConfigurationError(f"Invalid MAX_WORDS_IN_MEMORY: {raw}")
        return value
