"""Shared fixtures for ticketscan tests."""

import asyncio
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from ticketscan.api.server import create_app
from ticketscan.config import ServerSettings, Settings
from ticketscan.models.ticket import ScanResult, ScanState, TicketStatus
from ticketscan.scanner.client import VerificationClient


@pytest.fixture
def settings():
    return Settings(server=ServerSettings(csrf_enabled=True))


@pytest.fixture
def api_client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def csrf_token(api_client):
    """Load the scanner page so the client holds the CSRF cookie."""
    resp = api_client.get("/")
    assert resp.status_code == 200
    return resp.cookies["csrf_token"]


@pytest.fixture
def verify_client():
    client = AsyncMock(spec=VerificationClient)
    client.verify.return_value = ScanResult.for_status(TicketStatus.VALID)
    return client


async def wait_for_state(scanner, state: ScanState, timeout: float = 1.0) -> None:
    """Poll until scanner reaches state."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while scanner.state != state:
        if loop.time() > deadline:
            raise AssertionError(f"Scanner stuck in {scanner.state}, expected {state}")
        await asyncio.sleep(0.001)


async def wait_for(predicate, timeout: float = 1.0) -> None:
    """Poll until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.001)
