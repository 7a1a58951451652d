import os
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

import pytest
import redis

# Settings are read at import time
os.environ.setdefault("API_AUTH", "test-secret")
os.environ.setdefault("MAX_AGE_DAYS", "30")

from analytics_engine.main import app  # noqa: E402
from analytics_engine.services.store import PartitionedEventStore  # noqa: E402


@dataclass
class _FakePipeline:
    owner: "_FakeRedis"
    commands: List[Tuple[str, tuple]] = field(default_factory=list)

    def zadd(self, key, mapping):
        self.commands.append(("zadd", (key, mapping)))
        return self

    def expire(self, key, seconds):
        self.commands.append(("expire", (key, seconds)))
        return self

    def execute(self):
        return [getattr(self.owner, name)(*args) for name, args in self.commands]


@dataclass
class _FakeRedis:
    """In-memory stand-in for the sorted-set and key commands the store uses"""

    zsets: Dict[str, Dict[bytes, float]] = field(default_factory=dict)
    expires_at: Dict[str, float] = field(default_factory=dict)
    now: Optional[float] = None

    def _clock(self) -> float:
        return self.now if self.now is not None else time.time()

    def _purge(self, key: str) -> None:
        deadline = self.expires_at.get(key)
        if deadline is not None and deadline <= self._clock():
            self.zsets.pop(key, None)
            self.expires_at.pop(key, None)

    def ping(self):
        return True

    def pipeline(self):
        return _FakePipeline(owner=self)

    def zadd(self, key, mapping):
        self._purge(key)
        members = self.zsets.setdefault(key, {})
        # Members come back as bytes, as with decode_responses=False
        mapping = {m.encode() if isinstance(m, str) else m: score for m, score in mapping.items()}
        added = sum(1 for m in mapping if m not in members)
        members.update({m: float(score) for m, score in mapping.items()})
        return added

    def expire(self, key, seconds):
        if isinstance(seconds, timedelta):
            seconds = int(seconds.total_seconds())
        if key not in self.zsets:
            return False
        self.expires_at[key] = self._clock() + seconds
        return True

    def ttl(self, key):
        self._purge(key)
        if key not in self.zsets:
            return -2
        if key not in self.expires_at:
            return -1
        return int(self.expires_at[key] - self._clock())

    def zrangebyscore(self, key, min_score, max_score):
        self._purge(key)
        low = float(min_score)
        high = float("inf") if max_score == "+inf" else float(max_score)
        members = self.zsets.get(key, {})
        return [m for m, score in sorted(members.items(), key=lambda kv: kv[1]) if low <= score <= high]

    def delete(self, *keys):
        removed = 0
        for key in keys:
            self._purge(key)
            if self.zsets.pop(key, None) is not None:
                removed += 1
            self.expires_at.pop(key, None)
        return removed

    def dbsize(self):
        for key in list(self.zsets):
            self._purge(key)
        return len(self.zsets)

    def close(self):
        pass


class _UnreachableRedis:
    """Every command fails the way a dropped connection does"""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")
        return fail


@pytest.fixture
def fake_redis():
    return _FakeRedis()


@pytest.fixture
def store(fake_redis):
    return PartitionedEventStore(fake_redis, prefix="analyticsEngine")


@pytest.fixture
def broken_store():
    return PartitionedEventStore(_UnreachableRedis(), prefix="analyticsEngine")


@pytest.fixture
def app_with_store(store):
    """The application wired to the in-memory store, as lifespan would do"""
    app.state.store = store
    app.state.started_at = time.time() - 90061
    yield app
    del app.state.store
    del app.state.started_at


@pytest.fixture
def app_with_broken_store(broken_store):
    app.state.store = broken_store
    app.state.started_at = time.time()
    yield app
    del app.state.store
    del app.state.started_at
