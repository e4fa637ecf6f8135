"""
Hebrew Reader — Morphology Analysis State
=========================================

What:  Holds the state of the morphology panel: status, results, raw model
       answer and error, and keeps the raw answer in client storage so the
       last analysis survives a restart.

State machine:
    idle ──analyze()──→ loading ──ok──→ success
                           │
                           └──fail──→ error
    clear_results() → idle        clear_error() keeps status/results

Cache:
    Key "morphology_raw_response" holds the raw model answer, possibly
    wrapped in a ```json fence. `restore()` parses it and marks every word
    valid without re-checking; `entry.validated` is False for restored data
    and True for a fresh analysis.

Overlapping `analyze()` calls are not cancelled; whichever finishes last
wins.
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from hebrew_reader.client.storage import KeyValueStorage
from hebrew_reader.schemas.analysis import MorphologyResult, MorphologyServiceResponse
from hebrew_reader.services.morphology_service import (
    UNEXPECTED_ERROR_MESSAGE,
    MorphologyConfig,
    analyze_morphology,
)
from hebrew_reader.text.morphology import assume_valid, parse_morphology_json

logger = logging.getLogger(__name__)

STORAGE_KEY = "morphology_raw_response"
UNKNOWN_ERROR_MESSAGE = "שגיאה לא ידועה בניתוח מורפולוגי"

AnalyzeFn = Callable[[str, MorphologyConfig], Awaitable[MorphologyServiceResponse]]


class AnalysisStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class CachedAnalysis:
    raw_response: str
    results: List[MorphologyResult] = field(default_factory=list)
    validated: bool = False


class MorphologyState:
    """
    Client-side morphology analysis.

    Args:
        storage:         where the raw answer is cached
        config_provider: returns the current MorphologyConfig (read on every
                         analyze() so settings changes apply immediately)
        analyze:         the analysis call; must return a result object
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        config_provider: Callable[[], MorphologyConfig],
        analyze: AnalyzeFn = analyze_morphology,
    ):
        self.storage = storage
        self.config_provider = config_provider
        self._analyze = analyze

        self.status = AnalysisStatus.IDLE
        self.results: Optional[List[MorphologyResult]] = None
        self.raw_response: Optional[str] = None
        self.error: Optional[str] = None
        self.entry: Optional[CachedAnalysis] = None

    @property
    def is_loading(self) -> bool:
        return self.status is AnalysisStatus.LOADING

    async def restore(self) -> None:
        """
        Load the cached raw answer, if any.

        Storage errors are logged and leave the state idle; parse errors keep
        only the raw text.
        """
        try:
            raw = await self.storage.get_item(STORAGE_KEY)
        except Exception as e:
            logger.warning("Failed to load cached morphology response: %s", str(e))
            return
        if not raw:
            return

        self.raw_response = raw
        try:
            results = assume_valid(parse_morphology_json(raw))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to parse cached morphology response: %s", str(e))
            return

        self.results = results
        self.entry = CachedAnalysis(raw_response=raw, results=results, validated=False)
        self.status = AnalysisStatus.SUCCESS

    async def analyze(self, text: str) -> Dict[str, Any]:
        """
        Run an analysis and update state.

        Returns {"success": True, "results": [...]} or
        {"success": False, "error": "..."}; never raises.
        A failure to write the cache is logged; the in-memory result stands.
        """
        self.status = AnalysisStatus.LOADING
        self.error = None

        try:
            response = await self._analyze(text, self.config_provider())
        except Exception as e:
            logger.error("Morphology analysis raised: %s", str(e), exc_info=True)
            message = str(e) or UNEXPECTED_ERROR_MESSAGE
            self.error = message
            self.status = AnalysisStatus.ERROR
            return {"success": False, "error": message}

        if response.success and response.results is not None:
            raw = response.raw_response or ""
            self.results = response.results
            self.raw_response = raw
            self.entry = CachedAnalysis(raw_response=raw, results=response.results, validated=True)
            try:
                await self.storage.set_item(STORAGE_KEY, raw)
            except Exception as e:
                logger.warning("Failed to cache morphology response: %s", str(e))
            self.status = AnalysisStatus.SUCCESS
            return {"success": True, "results": response.results}

        message = response.error or UNKNOWN_ERROR_MESSAGE
        self.error = message
        if response.raw_response:
            self.raw_response = response.raw_response
        self.status = AnalysisStatus.ERROR
        return {"success": False, "error": message}

    async def clear_results(self) -> None:
        self.results = None
        self.raw_response = None
        self.error = None
        self.entry = None
        self.status = AnalysisStatus.IDLE
        try:
            await self.storage.remove_item(STORAGE_KEY)
        except Exception as e:
            logger.warning("Failed to remove cached morphology response: %s", str(e))

    def clear_error(self) -> None:
        self.error = None
