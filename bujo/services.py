"""Wiring of client, store, gateway and orchestrator for a Streamlit session.

The thread pool and logging setup are per process (``st.cache_resource``);
everything else is per browser session and cached in ``st.session_state``.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import requests
import streamlit as st

from bujo.api_client import BujoApiClient
from bujo.config import BujoConfig, get_config
from bujo.gateway import TaskActionGateway
from bujo.logging_setup import setup_logging
from bujo.orchestrator import AccountRefreshOrchestrator
from bujo.store import AppStore

logger = logging.getLogger(__name__)

_SERVICES_KEY = "_bujo_services"


@dataclass
class Services:
    config: BujoConfig
    client: BujoApiClient
    store: AppStore
    gateway: TaskActionGateway
    orchestrator: AccountRefreshOrchestrator


def build_services(
    config: BujoConfig,
    executor: Executor,
    session: Optional[requests.Session] = None,
) -> Services:
    client = BujoApiClient(config, session=session)
    store = AppStore(client, executor)
    gateway = TaskActionGateway(client, executor, notifier=store.report_error)
    gateway.add_listener(store.on_mutation)
    orchestrator = AccountRefreshOrchestrator(client, store, executor)
    return Services(config=config, client=client, store=store, gateway=gateway, orchestrator=orchestrator)


@st.cache_resource(show_spinner=False)
def _shared_executor(max_workers: int) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bujo-io")


@st.cache_resource(show_spinner=False)
def _init_logging(log_dir: str, level: str) -> str:
    log_file = setup_logging(log_dir=log_dir, console_level=level)
    logger.info("Logging to %s", log_file)
    return str(log_file)


def get_services(force_new: bool = False) -> Services:
    """Services for the current session, created on first use."""
    config = get_config()
    _init_logging(str(config.log_dir), config.log_level)

    if not force_new and _SERVICES_KEY in st.session_state:
        return st.session_state[_SERVICES_KEY]

    services = build_services(config, _shared_executor(config.max_workers))
    st.session_state[_SERVICES_KEY] = services
    logger.debug("Created services for %s", config.api_base_url)
    return services
