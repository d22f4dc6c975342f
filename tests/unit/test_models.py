"""
Tests for connection and query models
"""

import pytest
from pydantic import ValidationError

from d365fo_metadata.config import Settings
from d365fo_metadata.errors import ConfigurationError
from d365fo_metadata.models import (
    ConnectionContext,
    Contains,
    ExactName,
    MetadataQuery,
    MetadataResource,
    RawOnly,
    query_mode_from_parameters,
)


@pytest.mark.unit
class TestConnectionContext:
    def test_system_url_defaults_to_base_url(self):
        context = ConnectionContext(base_url="https://a.dynamics.com/")

        assert context.base_url == "https://a.dynamics.com"
        assert context.system_url == "https://a.dynamics.com"

    def test_strips_exactly_one_separator(self):
        context = ConnectionContext(base_url="https://a.dynamics.com//")

        assert context.base_url == "https://a.dynamics.com/"

    def test_explicit_parameters_override_settings(self, mock_settings):
        context = ConnectionContext.resolve(
            mock_settings,
            tenant="other-tenant",
            url="https://other.dynamics.com/",
            client_secret="other-secret",
        )

        assert context.tenant_id == "other-tenant"
        assert context.base_url == "https://other.dynamics.com"
        assert context.system_url == "https://other.dynamics.com"
        assert context.client_id == "test-client-id"
        assert context.client_secret == "other-secret"

    def test_empty_parameters_fall_back_to_settings(self, mock_settings):
        context = ConnectionContext.resolve(mock_settings, url="", tenant=None)

        assert context.base_url == mock_settings.url
        assert context.tenant_id == mock_settings.tenant

    def test_default_system_url_used_with_default_url(self):
        settings = Settings(
            _env_file=None,
            url="https://a.dynamics.com",
            system_url="https://a-aos.cloudax.dynamics.com/",
        )

        context = ConnectionContext.resolve(settings)

        assert context.base_url == "https://a.dynamics.com"
        assert context.system_url == "https://a-aos.cloudax.dynamics.com"

    def test_resolve_without_settings_uses_only_parameters(self, monkeypatch):
        monkeypatch.setenv("D365FO_URL", "https://from-env.dynamics.com")

        context = ConnectionContext.resolve(token="abc")

        assert context.base_url == ""
        assert context.token == "abc"

    def test_settings_read_environment(self, monkeypatch):
        monkeypatch.setenv("D365FO_URL", "https://from-env.dynamics.com")
        monkeypatch.setenv("D365FO_REQUEST_TIMEOUT", "12")

        settings = Settings(_env_file=None)

        assert settings.url == "https://from-env.dynamics.com"
        assert settings.request_timeout == 12.0

    def test_secrets_not_in_repr_or_description(self):
        context = ConnectionContext(base_url="https://a.dynamics.com", client_secret="s3cret", token="t0ken")

        assert "s3cret" not in repr(context)
        assert "t0ken" not in repr(context)
        assert "s3cret" not in str(context.describe())
        assert context.describe()["has_token"] is True

    def test_context_is_immutable(self):
        context = ConnectionContext(base_url="https://a.dynamics.com")

        with pytest.raises(ValidationError):
            context.base_url = "https://b.dynamics.com"


@pytest.mark.unit
class TestQueryMode:
    def test_exact_name(self):
        assert query_mode_from_parameters(name="CustomersV3") == ExactName(value="CustomersV3")

    def test_contains(self):
        assert query_mode_from_parameters(name_contains="cust") == Contains(value="cust")

    def test_neither_is_raw_only(self):
        assert query_mode_from_parameters() == RawOnly()
        assert query_mode_from_parameters(name="", name_contains="") == RawOnly()

    def test_both_rejected(self):
        with pytest.raises(ConfigurationError):
            query_mode_from_parameters(name="CustomersV3", name_contains="cust")

    def test_empty_match_text_rejected(self):
        with pytest.raises(ValidationError):
            ExactName(value="")

    def test_mode_from_dict_uses_discriminator(self):
        query = MetadataQuery.model_validate({
            "resource": "PublicEnumerations",
            "mode": {"kind": "contains", "value": "Status"},
        })

        assert query.resource is MetadataResource.PUBLIC_ENUMERATIONS
        assert isinstance(query.mode, Contains)


@pytest.mark.unit
class TestMetadataQuery:
    def test_search_term_prefers_match_text(self):
        query = MetadataQuery(
            resource=MetadataResource.PUBLIC_ENTITIES,
            mode=ExactName(value="CustomersV3"),
            odata_suffix="$top=1",
        )

        assert query.search_term == "CustomersV3"

    def test_search_term_falls_back_to_suffix_then_resource(self):
        with_suffix = MetadataQuery(resource=MetadataResource.PUBLIC_ENTITIES, odata_suffix="$top=1")
        bare = MetadataQuery(resource=MetadataResource.PUBLIC_ENUMERATIONS)

        assert with_suffix.search_term == "$top=1"
        assert bare.search_term == "PublicEnumerations"

    def test_resource_name_fields(self):
        assert MetadataResource.PUBLIC_ENTITIES.name_fields == ("Name", "EntitySetName")
        assert MetadataResource.PUBLIC_ENUMERATIONS.name_fields == ("Name", "LabelId")
        assert MetadataResource.PUBLIC_ENUMERATIONS.path == "metadata/PublicEnumerations"
