"""
Feedback sinks: speech, haptics and the status/result lines.
"""

import logging
import threading
import time

import pyttsx3

from config import PipelineConfig

logger = logging.getLogger(__name__)


class Speaker:
    """Non-blocking text-to-speech with a global cooldown between utterances."""

    def __init__(self, enabled: bool = True, config: dict = None, clock=time.monotonic):
        self.config = config or PipelineConfig.FEEDBACK
        self.cooldown = self.config['SPEAK_COOLDOWN_MS'] / 1000.0
        self._tts_on = threading.Event()
        if enabled:
            self._tts_on.set()
        self.clock = clock
        self.history = []
        self._last_spoken_at = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._tts_on.is_set()

    def speak(self, text: str, force: bool = False) -> bool:
        """
        Queue text for speech.

        Returns False when dropped by the cooldown. force bypasses the cooldown
        and leaves it untouched (session announcements, mismatch warnings).
        """
        if not text:
            return False

        now = self.clock()
        if (not force and self._last_spoken_at is not None
                and now - self._last_spoken_at < self.cooldown):
            logger.debug(f"Speech cooldown, dropped: {text}")
            return False

        if not force:
            self._last_spoken_at = now
        self.history.append(text)
        logger.info(f"SPEAK: {text}")

        if self._tts_on.is_set():
            threading.Thread(target=self._say, args=(text,), daemon=True).start()
        return True

    def _say(self, text: str):
        # Engine is created inside the worker thread; pyttsx3 engines are not thread-safe
        with self._lock:
            try:
                engine = pyttsx3.init()
                engine.setProperty('rate', self.config['SPEECH_RATE'])
                engine.setProperty('volume', self.config['SPEECH_VOLUME'])
                engine.say(text)
                engine.runAndWait()
            except Exception as e:
                logger.warning(f"Speech failed, disabling TTS: {e}")
                self._tts_on.clear()


class Haptics:
    """Vibration sink. Desktops have no motor, so pulses are logged and counted."""

    def __init__(self):
        self.pulses = []

    def vibrate(self, ms: int = 200):
        if ms <= 0:
            return
        self.pulses.append(ms)
        logger.info(f"VIBRATE: {ms} ms")


class StatusBoard:
    """Holds the status and result lines shown to the user."""

    def __init__(self):
        self.status = ''
        self.result = ''

    def set_status(self, text: str):
        if text is None or text == self.status:
            return
        self.status = text
        logger.info(f"STATUS: {text}")

    def set_result(self, text: str):
        if text is None or text == self.result:
            return
        self.result = text
        logger.info(f"RESULT: {text}")
