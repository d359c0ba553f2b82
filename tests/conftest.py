"""Shared fixtures: throwaway database, in-memory cache and a scripted SquadCast."""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from cryptography.fernet import Fernet

_DB_DIR = tempfile.mkdtemp(prefix="squadcast-tests-")
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode("utf-8")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")


class FakeSquadcast:
    """Scripted stand-in for the SquadCast API served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.routes[(method, f"/v2{path}")] = (status_code, json, error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "not found"})
        status_code, body, error = route
        if error is not None:
            raise error
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: Optional[str] = None) -> List[httpx.Request]:
        if method is None:
            return list(self.requests)
        return [request for request in self.requests if request.method == method]


@pytest.fixture()
def squadcast() -> FakeSquadcast:
    return FakeSquadcast()


@pytest.fixture(autouse=True)
def clean_database():
    from backend.models.base import Base
    from backend.services.db import engine, init_db

    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def memory_cache(monkeypatch) -> Dict[str, str]:
    import backend.services.shows as shows_mod

    store: Dict[str, str] = {}

    def fake_cache_set(key: str, value: str, ex: Optional[int] = None) -> bool:
        store[key] = value
        return True

    def fake_cache_get(key: str) -> Optional[str]:
        return store.get(key)

    def fake_cache_delete(key: str) -> int:
        return 1 if store.pop(key, None) is not None else 0

    monkeypatch.setattr(shows_mod, "cache_set", fake_cache_set)
    monkeypatch.setattr(shows_mod, "cache_get", fake_cache_get)
    monkeypatch.setattr(shows_mod, "cache_delete", fake_cache_delete)
    return store
