# energycoach/channels.py
"""
Notification channels and the audible cue.

The host probes once at startup and hands the resolved variants to the
engine; nothing in the core checks for desktop APIs at call time.

    NativeChannel  - desktop notification via plyer
    InAppChannel   - host callback (the Tk sticky toast)
    NoopChannel    - nothing available
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional

from plyer import notification

logger = logging.getLogger(__name__)

GRANTED = "granted"
DENIED = "denied"
UNSUPPORTED = "unsupported"

APP_NAME = "EnergyCoach"

# Platforms plyer ships a notification backend for
NATIVE_PLATFORMS = ("win32", "darwin", "linux")


class NotificationChannel(ABC):
    name = "channel"

    @abstractmethod
    def request_permission(self) -> str:
        ...

    @abstractmethod
    def send(self, title: str, body: str) -> None:
        """Deliver one notification; may raise."""
        ...


class NativeChannel(NotificationChannel):
    name = "native"

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def request_permission(self) -> str:
        # Desktop notifications need no grant; plyer raises if no backend exists.
        return GRANTED

    def send(self, title: str, body: str) -> None:
        notification.notify(title=title, message=body, app_name=APP_NAME, timeout=self.timeout)


class InAppChannel(NotificationChannel):
    name = "in-app"

    def __init__(self, show: Callable[[str, str], None]):
        self._show = show

    def request_permission(self) -> str:
        return GRANTED

    def send(self, title: str, body: str) -> None:
        self._show(title, body)


class NoopChannel(NotificationChannel):
    name = "noop"

    def request_permission(self) -> str:
        return UNSUPPORTED

    def send(self, title: str, body: str) -> None:
        logger.info("No notification channel; dropped: %s", title)


class Notifier:
    """
    Best-effort delivery: try the primary channel, fall back to the
    secondary one. Failures end here; callers only see True/False.
    """

    def __init__(self, primary: NotificationChannel, fallback: Optional[NotificationChannel] = None):
        self.primary = primary
        self.fallback = fallback or NoopChannel()

    def request_permission(self) -> str:
        try:
            state = self.primary.request_permission()
        except Exception as e:
            logger.warning("Permission request on %s failed: %s", self.primary.name, e)
            state = UNSUPPORTED
        if state == GRANTED:
            return state
        return self.fallback.request_permission()

    def deliver(self, title: str, body: str) -> bool:
        for channel in (self.primary, self.fallback):
            try:
                channel.send(title, body)
                logger.info("Delivered via %s: %s", channel.name, title)
                return True
            except Exception as e:
                logger.warning("%s delivery failed, trying next channel: %s", channel.name, e)
        return False


def probe_channel(in_app: Optional[Callable[[str, str], None]] = None,
                  platform: str = sys.platform) -> Notifier:
    """Resolve the notifier once at startup."""
    fallback = InAppChannel(in_app) if in_app else NoopChannel()
    if platform.startswith(NATIVE_PLATFORMS):
        return Notifier(NativeChannel(), fallback)
    logger.info("Native notifications unavailable on %s; using %s", platform, fallback.name)
    return Notifier(fallback)


# ---------- Audible cue ----------
class AudibleCue(ABC):
    @abstractmethod
    def play(self, duration_ms: int, frequency_hz: int) -> None:
        ...

    def emit(self, duration_ms: int = 400, frequency_hz: int = 880) -> None:
        """Fire-and-forget; errors are logged, never raised."""
        try:
            self.play(duration_ms, frequency_hz)
        except Exception as e:
            logger.warning("Audible cue failed: %s", e)


class WinsoundCue(AudibleCue):
    def play(self, duration_ms: int, frequency_hz: int) -> None:
        import winsound
        winsound.Beep(int(frequency_hz), int(duration_ms))


class BellCue(AudibleCue):
    """System bell through the host (e.g. ``tk_root.bell``); no pitch control."""

    def __init__(self, bell: Callable[[], None]):
        self._bell = bell

    def play(self, duration_ms: int, frequency_hz: int) -> None:
        self._bell()


class NoopCue(AudibleCue):
    def play(self, duration_ms: int, frequency_hz: int) -> None:
        pass


def probe_cue(bell: Optional[Callable[[], None]] = None) -> AudibleCue:
    if sys.platform == "win32":
        return WinsoundCue()
    if bell is not None:
        return BellCue(bell)
    return NoopCue()
