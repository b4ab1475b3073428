from __future__ import annotations

import itertools

import pytest

from digest_builder_core.store import DigestStore


@pytest.fixture()
def store() -> DigestStore:
    counter = itertools.count(1)
    return DigestStore(id_factory=lambda: f"id{next(counter)}")


@pytest.fixture()
def notifications(store: DigestStore) -> list[int]:
    seen: list[int] = []
    store.subscribe(lambda doc: seen.append(len(doc.sections)))
    return seen
