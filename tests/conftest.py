import pytest
import pytest_asyncio
from unittest.mock import Mock, AsyncMock

from cloud_code_client.client import CloudCodeClient
from cloud_code_client.services.configuration_service import ConfigurationService, HttpConfig
from cloud_code_client.services.http_client import HttpClientService
from tests.fake_backend import FakeBackend
from tests.test_fixtures import TestFixtures


@pytest.fixture
def config_service():
    """Configuration pointing at the fake backend, with instant polling."""
    return ConfigurationService.from_settings(
        server_url=TestFixtures.SERVER_URL,
        application_id=TestFixtures.APPLICATION_ID,
        rest_api_key=TestFixtures.REST_API_KEY,
        master_key=TestFixtures.MASTER_KEY,
        poll_interval=0,
    )


@pytest.fixture
def config_service_without_master_key():
    return ConfigurationService.from_settings(
        server_url=TestFixtures.SERVER_URL,
        application_id=TestFixtures.APPLICATION_ID,
        poll_interval=0,
    )


@pytest.fixture
def mock_configuration_service():
    """Create a mock configuration service."""
    mock_config = Mock(spec=ConfigurationService)
    mock_config.get_server_url.return_value = TestFixtures.SERVER_URL + "/"
    mock_config.get_application_id.return_value = TestFixtures.APPLICATION_ID
    mock_config.get_rest_api_key.return_value = None
    mock_config.get_master_key.return_value = TestFixtures.MASTER_KEY
    mock_config.get_poll_interval.return_value = 0
    mock_config.get_http_config.return_value = HttpConfig()
    return mock_config


@pytest.fixture
def mock_http_client_service(mock_configuration_service):
    """Create a mock HTTP client service."""
    mock_service = AsyncMock(spec=HttpClientService)
    mock_service.config_service = mock_configuration_service
    return mock_service


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def client(config_service, fake_backend):
    """Client wired to the fake backend."""
    async with CloudCodeClient(config_service, transport=fake_backend.transport()) as cloud_client:
        yield cloud_client
