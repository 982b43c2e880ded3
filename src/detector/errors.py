"""
Detector error taxonomy.

Only EngineUnavailable and SessionAcquisitionFailed ever reach the caller.
NavigationDegraded and InteractionSkipped are raised by the session wrapper
and swallowed by the runner; they only show up as a poorer result.
"""
from __future__ import annotations


class DetectorError(Exception):
    pass


class EngineUnavailable(DetectorError):
    """Browser automation could not be initialized in this process."""


class SessionAcquisitionFailed(DetectorError):
    """Browser process or context could not be created for a run."""


class NavigationDegraded(DetectorError):
    """Page load failed or timed out."""


class InteractionSkipped(DetectorError):
    """A click on a trigger selector or the video element did not happen."""

    def __init__(self, selector: str, reason: str = ""):
        self.selector = selector
        super().__init__(f"{selector}: {reason}" if reason else selector)
