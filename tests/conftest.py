"""
Pytest configuration and fixtures for D365FO metadata tests
"""

import pytest
import structlog
from unittest.mock import AsyncMock, MagicMock

from d365fo_metadata import config as config_module
from d365fo_metadata.config import Settings
from d365fo_metadata.models import ConnectionContext

TEST_URL = "https://contoso-test.sandbox.operations.dynamics.com"


@pytest.fixture(autouse=True, scope="session")
def structured_logging():
    """Send structlog events through stdlib logging so pytest captures them"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep developer .env files and D365FO_* variables out of the tests"""
    for name in ("TENANT", "URL", "SYSTEM_URL", "CLIENT_ID", "CLIENT_SECRET",
                 "REQUEST_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(f"D365FO_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    config_module.reset_settings()
    yield
    config_module.reset_settings()


@pytest.fixture
def mock_settings():
    """Settings for testing"""
    return Settings(
        _env_file=None,
        tenant="test-tenant-id",
        url=TEST_URL,
        client_id="test-client-id",
        client_secret="test-client-secret",
        request_timeout=5.0,
    )


@pytest.fixture
def context():
    return ConnectionContext(
        tenant_id="test-tenant-id",
        base_url=TEST_URL,
        client_id="test-client-id",
        client_secret="test-client-secret",
    )


@pytest.fixture
def entities_document():
    """PublicEntities response, deliberately out of order"""
    return {
        "@odata.context": f"{TEST_URL}/metadata/$metadata#PublicEntities",
        "value": [
            {
                "Name": "VendorsV2",
                "EntitySetName": "VendorsV2",
                "IsReadOnly": False,
                "Properties": [{"Name": "VendorAccountNumber", "IsKey": True}],
            },
            {
                "Name": "CustomerV3",
                "EntitySetName": "CustomersV3",
                "IsReadOnly": False,
                "Properties": [{"Name": "CustomerAccount", "IsKey": True}],
            },
            {
                "Name": "CurrencyRate",
                "EntitySetName": "CurrencyRates",
                "IsReadOnly": True,
                "Properties": [],
            },
        ],
    }


@pytest.fixture
def enums_document():
    """PublicEnumerations response with unsorted enums and members"""
    return {
        "@odata.context": f"{TEST_URL}/metadata/$metadata#PublicEnumerations",
        "value": [
            {
                "Name": "NoYes",
                "LabelId": "@SYS1",
                "Members": [
                    {"Name": "Yes", "Value": 1, "LabelId": "@SYS2"},
                    {"Name": "No", "Value": 0, "LabelId": "@SYS3"},
                ],
            },
            {
                "Name": "ABC",
                "LabelId": "@SYS4",
                "Members": [
                    {"Name": "C", "Value": 3, "LabelId": "@SYS7"},
                    {"Name": "None", "Value": 0, "LabelId": "@SYS5"},
                    {"Name": "A", "Value": 1, "LabelId": "@SYS6"},
                ],
            },
        ],
    }


@pytest.fixture
def mock_token_provider():
    """Mock token provider for testing"""
    provider = AsyncMock()
    provider.get_token.return_value = "mock-token"
    provider.get_provider_info = MagicMock(return_value={"type": "mock"})
    return provider


@pytest.fixture
def mock_metadata_client(entities_document):
    """Mock metadata client for testing"""
    client = AsyncMock()
    client.fetch.return_value = entities_document
    client.get_client_info = MagicMock(return_value={"type": "mock_client"})
    return client
