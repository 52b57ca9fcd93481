from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from app.core.repository import InMemoryRepo, MongoDBRepo
from app.core.schemas import GeocodeResult, PreferenceSignal

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def _signal(member_id: str, minutes_ago: int, venue_type: str = "bar") -> PreferenceSignal:
    return PreferenceSignal(
        member_id=member_id,
        positive_signal=True,
        venue_type=venue_type,
        created_at=NOW - timedelta(minutes=minutes_ago),
    )


def test_in_memory_signals_newest_first_for_members():
    repo = InMemoryRepo()
    repo.record_preference_signal(_signal("a", 30, "old"))
    repo.record_preference_signal(_signal("b", 10, "newest"))
    repo.record_preference_signal(_signal("c", 5, "other group"))
    repo.record_preference_signal(_signal("a", 20, "middle"))

    signals = repo.get_recent_preference_signals({"a", "b"})

    assert [s.venue_type for s in signals] == ["newest", "middle", "old"]


def test_in_memory_signals_limit():
    repo = InMemoryRepo()
    for i in range(30):
        repo.record_preference_signal(_signal("a", i))

    assert len(repo.get_recent_preference_signals(["a"], limit=20)) == 20


def test_in_memory_geocode_cache_counts_hits():
    repo = InMemoryRepo()
    result = GeocodeResult(lat=1.0, lon=2.0, display_name="Somewhere")

    assert repo.get_cached_geocode("somewhere") is None
    repo.cache_geocode("somewhere", result)

    assert repo.get_cached_geocode("somewhere") == result
    assert repo.get_cached_geocode("somewhere") == result
    assert repo.geocode_hits("somewhere") == 2


def _mongo_repo() -> tuple[MongoDBRepo, MagicMock, MagicMock]:
    client = MagicMock()
    db = MagicMock()
    signals = MagicMock()
    geocodes = MagicMock()
    client.__getitem__.return_value = db
    db.__getitem__.side_effect = lambda name: {
        "user_preference_signals": signals,
        "geocoding_cache": geocodes,
    }[name]
    return MongoDBRepo("", "planpal_test", client=client), signals, geocodes


def test_mongo_recent_signals_query():
    repo, signals, _ = _mongo_repo()
    cursor = signals.find.return_value.sort.return_value.limit.return_value
    cursor.__iter__.return_value = iter(
        [
            {
                "_id": "x1",
                "member_id": "a",
                "positive_signal": False,
                "venue_type": None,
                "venue_attributes": ["loud"],
                "weight": 0.5,
                "created_at": NOW,
            }
        ]
    )

    result = repo.get_recent_preference_signals(["a", "b"], limit=20)

    signals.find.assert_called_once_with({"member_id": {"$in": ["a", "b"]}})
    signals.find.return_value.sort.assert_called_once_with("created_at", -1)
    signals.find.return_value.sort.return_value.limit.assert_called_once_with(20)
    assert len(result) == 1
    assert result[0].venue_attributes == ["loud"]
    assert result[0].positive_signal is False


def test_mongo_record_signal_inserts_document():
    repo, signals, _ = _mongo_repo()

    repo.record_preference_signal(_signal("a", 0))

    document = signals.insert_one.call_args.args[0]
    assert document["member_id"] == "a"
    assert document["venue_type"] == "bar"


def test_mongo_cached_geocode_hit_increments_counter():
    repo, _, geocodes = _mongo_repo()
    geocodes.find_one.return_value = {
        "_id": "g1",
        "address_query": "blue note",
        "latitude": 40.73,
        "longitude": -74.0,
        "display_name": "Blue Note",
        "hits": 3,
    }

    result = repo.get_cached_geocode("blue note")

    assert result == GeocodeResult(lat=40.73, lon=-74.0, display_name="Blue Note")
    geocodes.update_one.assert_called_once_with({"_id": "g1"}, {"$inc": {"hits": 1}})


def test_mongo_cached_geocode_miss():
    repo, _, geocodes = _mongo_repo()
    geocodes.find_one.return_value = None
    assert repo.get_cached_geocode("nowhere") is None
    geocodes.update_one.assert_not_called()


def test_mongo_cache_geocode_upserts():
    repo, _, geocodes = _mongo_repo()

    repo.cache_geocode("blue note", GeocodeResult(lat=1.0, lon=2.0, display_name="Blue Note"))

    args, kwargs = geocodes.update_one.call_args
    assert args[0] == {"address_query": "blue note"}
    assert args[1]["$set"]["latitude"] == 1.0
    assert args[1]["$setOnInsert"] == {"hits": 0}
    assert kwargs["upsert"] is True


def test_in_memory_signals_with_same_timestamp_latest_insert_first():
    repo = InMemoryRepo()
    repo.record_preference_signal(_signal("a", 0, "first"))
    repo.record_preference_signal(_signal("a", 0, "second"))
    repo.record_preference_signal(_signal("a", 0, "third"))

    signals = repo.get_recent_preference_signals(["a"], limit=2)

    assert [s.venue_type for s in signals] == ["third", "second"]
