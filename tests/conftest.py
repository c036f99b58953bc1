"""Shared fixtures for service map tests."""

import json

import httpx
import pytest

from servicemap.map.adapters import SessionUI
from servicemap.map.controller import ServiceMapController
from servicemap.services.fallback import FALLBACK_SERVICES



@pytest.fixture
def fallback_payload():
    """Fallback records as the JSON a server would return."""
    return [s.model_dump() for s in FALLBACK_SERVICES]


@pytest.fixture
def services_file(tmp_path, fallback_payload):
    """services.json on disk with the six fallback records."""
    path = tmp_path / "services.json"
    path.write_text(json.dumps(fallback_payload), encoding="utf-8")
    return path


@pytest.fixture
def ui():
    return SessionUI()


@pytest.fixture
async def make_client():
    """Build an AsyncClient whose transport answers with `handler`."""
    clients = []

    def _make(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
async def loaded_controller(ui, services_file):
    """Controller with the map initialized and the fallback records loaded from disk."""
    controller = ServiceMapController(ui=ui, source=str(services_file))
    controller.initialize_map()
    await controller.load_services()
    return controller
