from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Protocol

from pymongo import DESCENDING, MongoClient

from app.core.schemas import GeocodeResult, PreferenceSignal
from app.core.settings import Settings

logger = logging.getLogger(__name__)


class PreferenceHistory(Protocol):
    def get_recent_preference_signals(
        self, member_ids: Iterable[str], limit: int = 20
    ) -> list[PreferenceSignal]: ...

    def record_preference_signal(self, signal: PreferenceSignal) -> None: ...


class GeocodeCache(Protocol):
    def get_cached_geocode(self, address_query: str) -> Optional[GeocodeResult]: ...

    def cache_geocode(self, address_query: str, result: GeocodeResult) -> None: ...


class InMemoryRepo:
    """Process-local store used when no database is configured."""

    def __init__(self):
        self._lock = threading.Lock()
        self._signals: list[PreferenceSignal] = []
        self._geocodes: dict[str, dict[str, Any]] = {}

    def get_recent_preference_signals(
        self, member_ids: Iterable[str], limit: int = 20
    ) -> list[PreferenceSignal]:
        ids = set(member_ids)
        with self._lock:
            matching = [(i, s) for i, s in enumerate(self._signals) if s.member_id in ids]
        # Later inserts win ties on created_at
        matching.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [signal for _, signal in matching[:limit]]

    def record_preference_signal(self, signal: PreferenceSignal) -> None:
        with self._lock:
            self._signals.append(signal)

    def get_cached_geocode(self, address_query: str) -> Optional[GeocodeResult]:
        with self._lock:
            entry = self._geocodes.get(address_query)
            if not entry:
                return None
            entry["hits"] += 1
            return entry["result"]

    def cache_geocode(self, address_query: str, result: GeocodeResult) -> None:
        with self._lock:
            self._geocodes[address_query] = {"result": result, "hits": 0}

    def geocode_hits(self, address_query: str) -> int:
        with self._lock:
            entry = self._geocodes.get(address_query)
            return entry["hits"] if entry else 0


class MongoDBRepo:
    def __init__(self, mongodb_uri: str, database_name: str, client: Any = None):
        if not mongodb_uri and client is None:
            raise ValueError("MONGODB_URI environment variable is required")

        self.client = client or MongoClient(
            mongodb_uri,
            serverSelectionTimeoutMS=5000,  # 5 second timeout
            connectTimeoutMS=10000,
            socketTimeoutMS=20000,
            retryWrites=True,
            retryReads=True,
        )
        self.db = self.client[database_name]
        self.preference_signals_collection = self.db["user_preference_signals"]
        self.geocoding_cache_collection = self.db["geocoding_cache"]

    # =========================================================================
    # Preference signals
    # =========================================================================

    def get_recent_preference_signals(
        self, member_ids: Iterable[str], limit: int = 20
    ) -> list[PreferenceSignal]:
        cursor = (
            self.preference_signals_collection.find({"member_id": {"$in": list(member_ids)}})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        signals = []
        for doc in cursor:
            doc.pop("_id", None)
            signals.append(PreferenceSignal.model_validate(doc))
        return signals

    def record_preference_signal(self, signal: PreferenceSignal) -> None:
        self.preference_signals_collection.insert_one(signal.model_dump())

    # =========================================================================
    # Geocoding cache
    # =========================================================================

    def get_cached_geocode(self, address_query: str) -> Optional[GeocodeResult]:
        doc = self.geocoding_cache_collection.find_one({"address_query": address_query})
        if not doc:
            return None

        self.geocoding_cache_collection.update_one(
            {"_id": doc["_id"]}, {"$inc": {"hits": 1}}
        )
        return GeocodeResult(
            lat=doc["latitude"], lon=doc["longitude"], display_name=doc["display_name"]
        )

    def cache_geocode(self, address_query: str, result: GeocodeResult) -> None:
        self.geocoding_cache_collection.update_one(
            {"address_query": address_query},
            {
                "$set": {
                    "latitude": result.lat,
                    "longitude": result.lon,
                    "display_name": result.display_name,
                    "updated_at": datetime.now(timezone.utc),
                },
                "$setOnInsert": {"hits": 0},
            },
            upsert=True,
        )


def get_repository(settings: Settings) -> InMemoryRepo | MongoDBRepo:
    """Use MongoDB when configured, otherwise an in-memory store."""
    if settings.mongodb_uri:
        logger.info(f"Using MongoDB database: {settings.database_name}")
        return MongoDBRepo(settings.mongodb_uri, settings.database_name)

    logger.warning("MONGODB_URI not set. Preference history and geocoding cache are in-memory.")
    return InMemoryRepo()
