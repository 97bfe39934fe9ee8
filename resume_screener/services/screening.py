"""
Screening Session Service: stored credential, criteria, language preference and scan history
"""
import threading
import time
from datetime import datetime
from typing import List, Optional, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from resume_screener.models.schemas import (
    DEFAULT_CRITERIA,
    Criteria,
    DocumentSource,
    HistoryEntry,
    Language,
    SettingsView,
)
from resume_screener.helpers.encoding import buffer_document
from resume_screener.services.criteria import has_valid_criteria
from resume_screener.services.notifier import LoggingNotifier, Notifier
from resume_screener.services.orchestrator import ResumeEvaluator
from resume_screener.services.store import (
    CREDENTIAL_KEY,
    CRITERIA_KEY,
    HISTORY_KEY,
    LANGUAGE_KEY,
    KeyValueStore,
)
from resume_screener.utils.exceptions import ScreenerBaseException
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

_history_adapter = TypeAdapter(List[HistoryEntry])


class ScreeningService:
    """
    Everything the presentation layer persists between scans. The evaluator itself
    never sees the store; this service reads settings and hands them over per call.
    """

    def __init__(
        self,
        store: KeyValueStore,
        evaluator: Optional[ResumeEvaluator] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.evaluator = evaluator or ResumeEvaluator(notifier=self.notifier)
        self._last_document: Optional[DocumentSource] = None
        self._history_lock = threading.Lock()

    # ---- credential ----
    @property
    def credential(self) -> Optional[str]:
        return self.store.get(CREDENTIAL_KEY) or None

    def save_credential(self, api_key: str) -> None:
        if api_key and api_key.strip():
            self.store.set(CREDENTIAL_KEY, api_key.strip())
        else:
            self.store.remove(CREDENTIAL_KEY)
        self.notifier.notify_success("API key saved")

    # ---- language ----
    @property
    def language(self) -> Language:
        saved = self.store.get(LANGUAGE_KEY)
        try:
            return Language(saved) if saved else Language.ENGLISH
        except ValueError:
            logger.warning(f"Ignoring unknown stored language {saved!r}")
            return Language.ENGLISH

    # ---- criteria ----
    @property
    def criteria(self) -> Criteria:
        saved = self.store.get(CRITERIA_KEY)
        if not saved:
            return DEFAULT_CRITERIA.model_copy(deep=True)
        try:
            return Criteria.model_validate_json(saved)
        except PydanticValidationError as e:
            logger.error(f"Failed to parse stored criteria: {e}")
            return DEFAULT_CRITERIA.model_copy(deep=True)

    def save_criteria(self, criteria: Criteria) -> None:
        self.store.set(CRITERIA_KEY, criteria.model_dump_json(by_alias=True))

    def settings_view(self) -> SettingsView:
        return SettingsView(
            has_credential=self.credential is not None,
            language=self.language,
            criteria=self.criteria,
        )

    # ---- history ----
    def history(self) -> List[HistoryEntry]:
        saved = self.store.get(HISTORY_KEY)
        if not saved:
            return []
        try:
            return _history_adapter.validate_json(saved)
        except PydanticValidationError as e:
            logger.error(f"Failed to parse history from store: {e}")
            return []

    def _save_history(self, entries: List[HistoryEntry]) -> None:
        self.store.set(HISTORY_KEY, _history_adapter.dump_json(entries, by_alias=True, exclude_unset=True).decode("utf-8"))

    def get_history_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((e for e in self.history() if e.id == entry_id), None)

    def clear_history(self) -> None:
        self.store.remove(HISTORY_KEY)
        self.notifier.notify_success("History cleared")

    @staticmethod
    def _next_id(entries: List[HistoryEntry]) -> str:
        # Millisecond timestamp, bumped so two scans in the same millisecond still differ
        next_id = time.time_ns() // 1_000_000
        if entries and entries[0].id.isdigit():
            next_id = max(next_id, int(entries[0].id) + 1)
        return str(next_id)

    # ---- scanning ----
    def scan(self, document: DocumentSource) -> HistoryEntry:
        """Evaluate with the stored settings and put the result at the top of the history."""
        document = buffer_document(document)
        self._last_document = document
        result = self.evaluator.evaluate(document, self.criteria, self.credential, self.language)

        with self._history_lock:
            entries = self.history()
            entry = HistoryEntry(
                id=self._next_id(entries),
                timestamp=datetime.now(),
                document_reference=document.filename,
                result=result,
            )
            self._save_history([entry] + entries)
        logger.info(f"Added scan {entry.id} for {document.filename} to history")
        return entry

    def change_language(self, language: Union[Language, str]) -> Optional[HistoryEntry]:
        """
        Save the preference and, when a document was scanned and the settings allow it,
        re-analyse it. The new result overwrites the newest history entry, even if another
        scan landed in between. A failed re-analysis leaves the history as it was and returns None.
        """
        language = Language(language)
        self.store.set(LANGUAGE_KEY, language.value)

        document = self._last_document
        if document is None or not self.credential or not has_valid_criteria(self.criteria):
            return None

        try:
            result = self.evaluator.evaluate(document, self.criteria, self.credential, language)
        except ScreenerBaseException as exc:
            # The evaluator has already notified the user; the new preference stays saved
            logger.error(f"Re-analysis of {document.filename} in {language.value} failed: {exc.message}")
            return None
        with self._history_lock:
            entries = self.history()
            if not entries:
                return None
            entries[0] = entries[0].model_copy(update={"result": result})
            self._save_history(entries)
        return entries[0]
