"""Media-type based selection of text extractors.

Extraction is best effort: a missing extractor, an extractor error and a
timeout all yield an empty string so the pipeline can still analyze whatever
evidence exists.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from docintake.extraction.base import BaseExtractor
from docintake.logging.logger import Log


def normalize_media_type(media_type: str) -> str:
    """Lower-case a media type and drop parameters such as '; charset=utf-8'."""
    return media_type.split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class ExtractorRoute:
    """A media-type pattern ('application/pdf' or 'image/*') and its extractor."""

    pattern: str
    extractor: BaseExtractor

    def matches(self, media_type: str) -> bool:
        if self.pattern.endswith("/*"):
            return media_type.startswith(self.pattern[:-1])
        return media_type == self.pattern


class ExtractionDispatcher:
    """Routes raw bytes to the extractor registered for their media type.

    With a timeout, each bounded call gets its own worker thread, so a stuck
    extraction never delays the ones that follow it.
    """

    def __init__(
        self,
        routes: list[ExtractorRoute] | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._routes: list[ExtractorRoute] = list(routes or [])
        self._timeout_seconds = timeout_seconds if timeout_seconds else None

    def register(self, pattern: str, extractor: BaseExtractor) -> None:
        """Add a route. Earlier routes win when several patterns match."""
        self._routes.append(ExtractorRoute(normalize_media_type(pattern), extractor))

    def extractor_for(self, media_type: str) -> BaseExtractor | None:
        normalized = normalize_media_type(media_type)
        for route in self._routes:
            if route.matches(normalized):
                return route.extractor
        return None

    def extract(self, media_type: str, file_bytes: bytes) -> str:
        extractor = self.extractor_for(media_type)
        if extractor is None:
            Log.debug("No extractor registered, skipping extraction", media_type=media_type)
            return ""

        name = type(extractor).__name__
        try:
            text = self._run(extractor, file_bytes)
        except FutureTimeoutError:
            Log.warning(
                f"{name} timed out after {self._timeout_seconds}s",
                media_type=media_type,
            )
            return ""
        except Exception as exc:
            Log.warning(f"{name} failed: {exc}", media_type=media_type)
            return ""

        if not isinstance(text, str):
            Log.warning(f"{name} returned {type(text).__name__}, expected str")
            return ""
        # PostgreSQL text and jsonb cannot hold NUL characters.
        return text.replace("\x00", "")

    def _run(self, extractor: BaseExtractor, file_bytes: bytes) -> str:
        if self._timeout_seconds is None or extractor.runs_inline:
            return extractor.extract(file_bytes)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="extract")
        try:
            future = executor.submit(extractor.extract, file_bytes)
            return future.result(timeout=self._timeout_seconds)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
