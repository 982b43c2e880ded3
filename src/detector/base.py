"""
Core types for the stream detector.

A detection run loads one embed page in a throwaway browser, records every
.m3u8 URL the page touches, and returns them ranked:
  - DetectionRequest: what to load and how long to wait
  - ObservedUrl: one matching URL, first sighting only
  - DetectionResult: ranked candidates + best guess
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_TIMEOUT_MS = 15000
DEFAULT_SETTLE_MS = 5000

# ObservedUrl.source values
SOURCE_REQUEST = "request"            # outgoing request
SOURCE_RESPONSE = "response"          # incoming response


# ──────────────────────────────
#  Input
# ──────────────────────────────
@dataclass(frozen=True)
class DetectionRequest:
    target_url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS      # page-load budget
    settle_ms: int = DEFAULT_SETTLE_MS        # post-load observation window
    attempt_playback_trigger: bool = True
    headless: bool = True

    def __post_init__(self):
        if not isinstance(self.target_url, str) or not self.target_url.strip():
            raise ValueError("target_url must be a non-empty string")
        # Playwright reads a 0 timeout as "wait forever"
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        if self.settle_ms < 0:
            raise ValueError("settle_ms must be >= 0")


# ──────────────────────────────
#  Observation
# ──────────────────────────────
@dataclass
class ObservedUrl:
    url: str
    source: str                       # "request" | "response"
    offset_ms: int

    @property
    def is_master(self) -> bool:
        return "master" in self.url

    def to_dict(self):
        return {"url": self.url, "source": self.source, "offsetMs": self.offset_ms}


# ──────────────────────────────
#  Final run output
# ──────────────────────────────
@dataclass
class DetectionResult:
    candidates: list[ObservedUrl] = field(default_factory=list)
    elapsed_ms: int = 0
    # Diagnostics only; never affect `succeeded`
    trigger: Optional[str] = None
    navigation_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return len(self.candidates) > 0

    @property
    def primary(self) -> Optional[ObservedUrl]:
        return self.candidates[0] if self.candidates else None

    @property
    def count(self) -> int:
        return len(self.candidates)

    def to_dict(self):
        primary = self.primary
        return {
            "succeeded": self.succeeded,
            "count": self.count,
            "candidates": [c.to_dict() for c in self.candidates],
            "primary": primary.to_dict() if primary else None,
            "elapsedMs": self.elapsed_ms,
            "trigger": self.trigger,
            "navigationError": self.navigation_error,
        }
