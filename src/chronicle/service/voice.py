# SPDX-License-Identifier: MIT

import errno
import logging
import re
import threading
import time
from typing import Any, Callable, Literal, Optional, Protocol, Sequence, TypedDict

import speech_recognition as sr

logger = logging.getLogger(__name__)

VoiceState = Literal["idle", "listening", "suspended_retry", "stopped"]

NO_SPEECH = "no-speech"
NOT_ALLOWED = "not-allowed"
AUDIO_CAPTURE = "audio-capture"
NETWORK = "network"
RESTART_LIMIT = "restart-limit"

ERROR_MESSAGES = {
    NOT_ALLOWED: "Microphone access denied",
    AUDIO_CAPTURE: "No microphone available",
    NETWORK: "Speech service unreachable",
    RESTART_LIMIT: "Recognition kept stopping without hearing anything",
}


class VoiceError(Exception):
    def __init__(self, code: str) -> None:
        super().__init__(ERROR_MESSAGES.get(code, "Voice recognition error"))
        self.code = code


class RecognitionResult(TypedDict):
    transcript: str
    is_final: bool


class TranscriptUpdate(TypedDict):
    final: str
    interim: str
    is_final: bool


class RecognitionEngine(Protocol):
    """
    A recognition session source. start() begins one session that reports
    back through the capture's handle_result, handle_error and handle_end.
    """

    def start(self, capture: "VoiceCapture") -> None: ...

    def stop(self) -> None: ...


class VoiceCapture:
    """
    Continuous voice capture over a recognition engine.

    States: idle -> listening on start(). An engine session that ends while
    recording moves to suspended_retry and is restarted after restart_delay.
    More than max_restarts restarts in a row without a final result stops
    recording with a restart-limit error. stop() and surfaced errors move to
    stopped.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        on_transcript: Callable[[TranscriptUpdate], None],
        on_error: Callable[[str], None],
        max_restarts: int = 5,
        restart_delay: float = 0.1,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self._engine = engine
        self._on_transcript = on_transcript
        self._on_error = on_error
        self.max_restarts = max_restarts
        self.restart_delay = restart_delay
        self._sleep = sleep
        self._lock = threading.RLock()
        self.state: VoiceState = "idle"
        self.restarts = 0

    @property
    def is_recording(self) -> bool:
        return self.state in ("listening", "suspended_retry")

    def start(self) -> None:
        with self._lock:
            if self.is_recording:
                return
            self.restarts = 0
            self.state = "listening"
        logger.info("voice capture started")
        self._engine.start(self)

    def stop(self) -> None:
        with self._lock:
            if self.state == "stopped":
                return
            self.state = "stopped"
        self._engine.stop()
        logger.info("voice capture stopped")

    def handle_result(
        self, results: Sequence[RecognitionResult], result_index: int
    ) -> None:
        """Process results from result_index on; earlier ones were already seen."""
        final_parts: list[str] = []
        interim_parts: list[str] = []
        for result in results[result_index:]:
            if result["is_final"]:
                final_parts.append(result["transcript"])
            else:
                interim_parts.append(result["transcript"])

        final = " ".join(part.strip() for part in final_parts).strip()
        interim = "".join(interim_parts).strip()
        if not final and not interim:
            return

        if final:
            with self._lock:
                self.restarts = 0
        self._on_transcript(
            {"final": final, "interim": interim, "is_final": bool(final)}
        )

    def handle_error(self, code: str) -> None:
        if code == NO_SPEECH:
            logger.debug("no speech detected")
            return

        logger.error("speech recognition error: %s", code)
        self.stop()
        self._on_error(code)

    def handle_end(self) -> None:
        with self._lock:
            if self.state != "listening":
                return
            if self.restarts >= self.max_restarts:
                self.state = "stopped"
                limit_reached = True
            else:
                self.state = "suspended_retry"
                self.restarts += 1
                limit_reached = False

        if limit_reached:
            logger.warning("voice capture gave up after %s restarts", self.restarts)
            self._engine.stop()
            self._on_error(RESTART_LIMIT)
            return

        logger.debug("recognition session ended, restart %s", self.restarts)
        self._sleep(self.restart_delay)
        with self._lock:
            if self.state != "suspended_retry":
                return
            self.state = "listening"
        self._engine.start(self)


class TranscriptBuffer:
    """Final text accumulated across updates, plus the latest interim text."""

    def __init__(self) -> None:
        self.text = ""
        self.interim = ""

    def apply(self, update: TranscriptUpdate) -> None:
        if update["is_final"] and update["final"]:
            self.text = re.sub(r"\s+", " ", f"{self.text} {update['final']}").strip()
            self.interim = ""
        elif update["interim"]:
            self.interim = update["interim"]

    @property
    def display(self) -> str:
        if self.interim:
            return f"{self.text} {self.interim}".strip()
        return self.text


def _capture_error_code(error: Exception) -> str:
    if isinstance(error, OSError) and error.errno in (errno.EACCES, errno.EPERM):
        return NOT_ALLOWED
    return AUDIO_CAPTURE


class SpeechRecognitionEngine:
    """
    Recognition sessions over the microphone with the SpeechRecognition
    package. A session transcribes phrases until listen_timeout passes in
    silence, then ends.
    """

    def __init__(
        self,
        language: str = "en-US",
        listen_timeout: float = 5.0,
        phrase_time_limit: float = 15.0,
        recognizer: Optional[sr.Recognizer] = None,
        microphone_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.language = language
        self.listen_timeout = listen_timeout
        self.phrase_time_limit = phrase_time_limit
        self._recognizer = recognizer if recognizer is not None else sr.Recognizer()
        self._microphone_factory = microphone_factory or sr.Microphone
        self._stop_event: Optional[threading.Event] = None

    def start(self, capture: VoiceCapture) -> None:
        stop_event = threading.Event()
        self._stop_event = stop_event
        thread = threading.Thread(
            target=self.__run_session, args=(capture, stop_event), daemon=True
        )
        thread.start()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    def __run_session(self, capture: VoiceCapture, stop_event: threading.Event) -> None:
        results: list[RecognitionResult] = []
        try:
            with self._microphone_factory() as source:
                self._recognizer.adjust_for_ambient_noise(source, duration=0.5)
                while not stop_event.is_set():
                    try:
                        audio = self._recognizer.listen(
                            source,
                            timeout=self.listen_timeout,
                            phrase_time_limit=self.phrase_time_limit,
                        )
                    except sr.WaitTimeoutError:
                        capture.handle_error(NO_SPEECH)
                        break
                    if stop_event.is_set():
                        break

                    try:
                        transcript = self._recognizer.recognize_google(
                            audio, language=self.language
                        )
                    except sr.UnknownValueError:
                        capture.handle_error(NO_SPEECH)
                        continue
                    except sr.RequestError as e:
                        logger.error("speech service request failed: %s", e)
                        capture.handle_error(NETWORK)
                        break

                    results.append({"transcript": transcript, "is_final": True})
                    capture.handle_result(results, len(results) - 1)
        except (OSError, AttributeError) as e:
            # AttributeError: PyAudio is not installed
            logger.error("audio capture unavailable: %s", e)
            capture.handle_error(_capture_error_code(e))

        if not stop_event.is_set():
            capture.handle_end()


def is_voice_supported() -> bool:
    """Whether a microphone can be opened for capture on this machine."""
    try:
        return len(sr.Microphone.list_microphone_names()) > 0
    except (OSError, AttributeError) as e:
        logger.info("voice capture not available: %s", e)
        return False
