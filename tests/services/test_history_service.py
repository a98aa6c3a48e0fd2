import asyncio
import json
import os
import random
from unittest.mock import patch

import pytest

from arcade.core.config import settings
from arcade.core.exceptions import PersistenceFailure
from arcade.models.tournament_model import Tournament
from arcade.services.history_service import HistoryService, build_record
from arcade.services.tournament_service import TournamentService

TEST_HISTORY_FILE = "test_history.json"


@pytest.fixture
def temp_history_file(tmp_path):
    return tmp_path / "data" / TEST_HISTORY_FILE


@pytest.fixture
def history_service(temp_history_file):
    return HistoryService(history_file_path=str(temp_history_file))


def completed_tournament():
    service = TournamentService(rng=random.Random(3))
    service.add_player("Alice", user_id="user_alice")
    service.add_player("Bob")
    service.start()
    service.record_match_result(11, 4)
    return service.tournament


class TestBuildRecord:

    def test_record_for_unfinished_tournament(self):
        tournament = Tournament()

        record = build_record(tournament)

        assert record.id == tournament.id
        assert record.completed is False
        assert record.startDate is None
        assert record.endDate is None
        assert record.matchCount == 0
        assert record.timestamp is not None

    def test_record_for_completed_tournament(self):
        tournament = completed_tournament()

        record = build_record(tournament)

        assert record.completed is True
        assert record.endDate is not None
        assert record.startDate == tournament.start_date
        assert record.matchCount == 1
        alice = next(p for p in record.players if p.name == "Alice")
        assert alice.userId == "user_alice"
        assert sorted((p.wins, p.losses) for p in record.players) == [(0, 1), (1, 0)]


class TestHistoryService:

    def test_creates_empty_file(self, history_service: HistoryService, temp_history_file):
        assert os.path.exists(temp_history_file)
        assert asyncio.run(history_service.load_history()) == []

    def test_save_writes_json_fields(self, history_service: HistoryService, temp_history_file):
        tournament = completed_tournament()

        record = asyncio.run(history_service.save(tournament))

        with open(temp_history_file, "r") as f:
            stored = json.load(f)
        assert len(stored) == 1
        assert set(stored[0]) == {"id", "players", "completed", "startDate", "endDate", "matchCount", "timestamp"}
        assert set(stored[0]["players"][0]) == {"id", "name", "userId", "wins", "losses"}
        assert stored[0]["id"] == record.id
        assert stored[0]["matchCount"] == 1

    def test_keeps_twenty_most_recent(self, history_service: HistoryService):
        ids = []
        for _ in range(21):
            tournament = Tournament()
            ids.append(tournament.id)
            asyncio.run(history_service.save(tournament))

        records = asyncio.run(history_service.load_history())

        assert len(records) == 20
        assert [r.id for r in records] == list(reversed(ids[1:]))
        assert ids[0] not in {r.id for r in records}

    def test_custom_cap(self, temp_history_file):
        service = HistoryService(history_file_path=str(temp_history_file), max_records=2)
        for _ in range(5):
            asyncio.run(service.save(Tournament()))

        assert len(asyncio.run(service.load_history())) == 2

    def test_missing_file_loads_empty(self, history_service: HistoryService, temp_history_file):
        os.remove(temp_history_file)

        assert asyncio.run(history_service.load_history()) == []

    def test_corrupted_file_raises(self, history_service: HistoryService, temp_history_file):
        with open(temp_history_file, "w") as f:
            f.write("{not json")

        with pytest.raises(PersistenceFailure):
            asyncio.run(history_service.load_history())

    def test_unreadable_path_raises(self, history_service: HistoryService, tmp_path):
        history_service.history_file_path = str(tmp_path)

        with pytest.raises(PersistenceFailure):
            asyncio.run(history_service.load_history())

    def test_failed_save_leaves_tournament_untouched(self, history_service: HistoryService, tmp_path):
        tournament = completed_tournament()
        before = tournament.model_dump()
        history_service.history_file_path = str(tmp_path)

        with pytest.raises(PersistenceFailure):
            asyncio.run(history_service.save(tournament))

        assert tournament.model_dump() == before

    def test_clear(self, history_service: HistoryService):
        asyncio.run(history_service.save(Tournament()))

        asyncio.run(history_service.clear())

        assert asyncio.run(history_service.load_history()) == []

    def test_concurrent_saves_keep_every_record(self, history_service: HistoryService):
        async def save_many(tournaments):
            return await asyncio.gather(*(history_service.save(t) for t in tournaments))

        for _ in range(5):
            asyncio.run(history_service.clear())
            tournaments = [Tournament() for _ in range(10)]

            asyncio.run(save_many(tournaments))

            records = asyncio.run(history_service.load_history())
            assert sorted(r.id for r in records) == sorted(t.id for t in tournaments)

    def test_concurrent_saves_respect_cap(self, temp_history_file):
        service = HistoryService(history_file_path=str(temp_history_file), max_records=20)

        async def save_many():
            return await asyncio.gather(*(service.save(Tournament()) for _ in range(25)))

        asyncio.run(save_many())

        assert len(asyncio.run(service.load_history())) == 20

    def test_failed_write_keeps_previous_history(self, history_service: HistoryService, temp_history_file):
        kept = Tournament()
        asyncio.run(history_service.save(kept))

        with patch("arcade.services.history_service.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceFailure):
                asyncio.run(history_service.save(Tournament()))

        records = asyncio.run(history_service.load_history())
        assert [r.id for r in records] == [kept.id]
        assert os.listdir(temp_history_file.parent) == [TEST_HISTORY_FILE]

    def test_defaults_come_from_settings(self, tmp_path):
        history_file = tmp_path / "history" / "from_settings.json"

        with patch.object(settings, "DATA_DIR", str(history_file.parent)), \
             patch.object(settings, "HISTORY_FILE", history_file.name), \
             patch.object(settings, "MAX_HISTORY_RECORDS", 3):
            service = HistoryService()

        assert service.history_file_path == str(history_file)
        assert service.max_records == 3
        assert os.path.exists(history_file)
