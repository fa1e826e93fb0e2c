# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from bujo.config import BujoConfig
from bujo.gateway import TaskActionGateway
from bujo.store import AppStore

from .fakes import FakeApiClient, ImmediateExecutor


@pytest.fixture()
def config(tmp_path: Path) -> BujoConfig:
    return BujoConfig(
        api_base_url="http://bujo.test",
        api_token="secret-token",
        username="alice",
        verify_ssl=True,
        timeout_seconds=5.0,
        max_workers=2,
        log_dir=tmp_path / "logs",
        log_level="INFO",
    )


@pytest.fixture()
def client() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture()
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture()
def store(client: FakeApiClient, executor: ImmediateExecutor) -> AppStore:
    return AppStore(client, executor)  # type: ignore[arg-type]


@pytest.fixture()
def gateway(client: FakeApiClient, executor: ImmediateExecutor, store: AppStore) -> TaskActionGateway:
    """Gateway wired to the store the same way services.build_services does it."""
    gw = TaskActionGateway(client, executor, notifier=store.report_error)  # type: ignore[arg-type]
    gw.add_listener(store.on_mutation)
    return gw
