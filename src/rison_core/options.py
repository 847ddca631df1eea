"""Per-call configuration for decoding and encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DuplicateKeys(Enum):
    ERROR = "error"          # (a:1,a:2) raises DuplicateKey
    LAST_WINS = "last_wins"  # (a:1,a:2) keeps a:2


class NumberMode(Enum):
    DISTINCT = "distinct"  # 3 -> int, 3.5 -> float
    UNIFIED = "unified"    # every number -> float


@dataclass(frozen=True)
class Options:
    """Knobs shared by the parser and the encoder.

    ``max_depth`` bounds how many arrays/objects may nest inside each other,
    on decode and on encode.
    """

    max_depth: int = 128
    duplicate_keys: DuplicateKeys = DuplicateKeys.ERROR
    numbers: NumberMode = NumberMode.DISTINCT

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")


DEFAULT_OPTIONS = Options()
