"""
Playback-inducement heuristics.

Most embed players only request their playlist once playback starts. We try
the big play buttons of well-known player skins in priority order and stop
at the first click that lands. None of these are expected to exist on a
given page, so a miss is never an error.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import InteractionSkipped

log = logging.getLogger("streamsniff.detector")

TRIGGER_TIMEOUT_MS = 1000
VIDEO_SELECTOR = "video"
VIDEO_FALLBACK_WAIT_MS = 2000


@dataclass(frozen=True)
class PlayTrigger:
    selector: str
    priority: int                     # lower runs first
    skin: str = "generic"


PLAY_TRIGGERS: list[PlayTrigger] = sorted([
    PlayTrigger('.jw-icon-display', 1, "jwplayer"),
    PlayTrigger('.vjs-big-play-button', 2, "videojs"),
    PlayTrigger('[class*="play-button"]', 3),
    PlayTrigger('[class*="playButton"]', 4),
    PlayTrigger('.play-btn', 5),
    PlayTrigger('button[aria-label*="play" i]', 6),
    PlayTrigger('[data-plyr="play"]', 7, "plyr"),
], key=lambda t: t.priority)


async def attempt_playback(session, triggers: list[PlayTrigger] = PLAY_TRIGGERS,
                           *, timeout_ms: int = TRIGGER_TIMEOUT_MS) -> Optional[PlayTrigger]:
    """Click the first trigger that works. Returns it, or None if all missed."""
    for trigger in triggers:
        try:
            await session.click(trigger.selector, timeout_ms=timeout_ms)
        except InteractionSkipped:
            continue
        log.info(f"  [>] Clicked: {trigger.selector} ({trigger.skin})")
        return trigger
    return None


async def click_video(session, *, wait_ms: int = VIDEO_FALLBACK_WAIT_MS) -> bool:
    """Last resort for players that only react to a click on the media element."""
    try:
        await session.click(VIDEO_SELECTOR, timeout_ms=TRIGGER_TIMEOUT_MS)
    except InteractionSkipped:
        return False
    log.info(f"  [>] Clicked: {VIDEO_SELECTOR} (fallback)")
    await session.wait(wait_ms)
    return True
