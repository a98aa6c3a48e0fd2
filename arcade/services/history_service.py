import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from arcade.core.config import settings
from arcade.core.exceptions import PersistenceFailure
from arcade.models.history_model import HistoryRecord, PlayerSummary
from arcade.models.tournament_model import Tournament

logger = logging.getLogger(__name__)


def build_record(tournament: Tournament) -> HistoryRecord:
    """Summarise a tournament as a history record. Reads the tournament only."""
    now = datetime.now(timezone.utc)
    return HistoryRecord(
        id=tournament.id,
        players=[
            PlayerSummary(id=p.id, name=p.name, userId=p.user_id, wins=p.wins, losses=p.losses)
            for p in tournament.players
        ],
        completed=tournament.completed,
        startDate=tournament.start_date,
        endDate=now if tournament.completed else None,
        matchCount=len(tournament.matches),
        timestamp=now,
    )


class HistoryService:
    """
    File-backed history of played tournaments, newest first, capped at
    ``max_records`` entries.

    File access runs in a worker thread. A per-instance lock serialises every
    read-modify-write of the file, and writes go to a temp file that replaces
    the history in one step, so readers only ever see a complete file.
    Nothing here writes to the tournament it is given.
    """

    def __init__(self, history_file_path: Optional[str] = None, max_records: Optional[int] = None):
        self.history_file_path = history_file_path or settings.history_file_path
        self.max_records = max_records if max_records is not None else settings.MAX_HISTORY_RECORDS
        self._lock = threading.Lock()

        directory = os.path.dirname(self.history_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.history_file_path):
            self._save_records_to_file([])

    def _load_records_from_file(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.history_file_path):
            return []
        try:
            with open(self.history_file_path, "r") as f:
                content = f.read()
        except OSError as e:
            logger.error("Could not read tournament history from %s: %s", self.history_file_path, e)
            raise PersistenceFailure(f"Could not read tournament history: {e}") from e
        if not content.strip():
            return []
        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Tournament history at %s is not valid JSON: %s", self.history_file_path, e)
            raise PersistenceFailure(f"Tournament history is corrupted: {e}") from e
        if not isinstance(records, list):
            raise PersistenceFailure("Tournament history must be a JSON list")
        return records

    def _save_records_to_file(self, records: List[Dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.history_file_path))
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile("w", dir=directory, suffix=".tmp", delete=False) as f:
                temp_path = f.name
                json.dump(records, f, indent=4)
            os.replace(temp_path, self.history_file_path)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)
            logger.error("Could not write tournament history to %s: %s", self.history_file_path, e)
            raise PersistenceFailure(f"Could not write tournament history: {e}") from e

    def _append_record(self, record: HistoryRecord) -> None:
        with self._lock:
            records = self._load_records_from_file()
            records.insert(0, record.model_dump(mode="json"))
            if len(records) > self.max_records:
                logger.debug("Evicting %d old tournament record(s)", len(records) - self.max_records)
                records = records[: self.max_records]
            self._save_records_to_file(records)

    def _read_records(self) -> List[HistoryRecord]:
        with self._lock:
            raw_records = self._load_records_from_file()
        try:
            return [HistoryRecord(**r) for r in raw_records]
        except (TypeError, ValidationError) as e:
            raise PersistenceFailure(f"Tournament history has an invalid record: {e}") from e

    def _clear_records(self) -> None:
        with self._lock:
            self._save_records_to_file([])

    async def save(self, tournament: Tournament) -> HistoryRecord:
        record = build_record(tournament)
        await run_in_threadpool(self._append_record, record)
        logger.info("Saved tournament %s to history", record.id)
        return record

    async def load_history(self) -> List[HistoryRecord]:
        return await run_in_threadpool(self._read_records)

    async def clear(self) -> None:
        await run_in_threadpool(self._clear_records)
