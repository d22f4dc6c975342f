"""
Query and connection models

Immutable value objects passed through the query pipeline.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import Settings
from .errors import ConfigurationError


def strip_trailing_separator(value: str) -> str:
    """Strip exactly one trailing '/' from a URL"""
    return value[:-1] if value.endswith("/") else value


class ConnectionContext(BaseModel):
    """Connection parameters for a single invocation"""

    model_config = ConfigDict(frozen=True)

    tenant_id: str = ""
    base_url: str = ""
    system_url: str = ""
    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    token: Optional[str] = Field(default=None, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _normalize_urls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        base_url = strip_trailing_separator((data.get("base_url") or "").strip())
        system_url = strip_trailing_separator((data.get("system_url") or "").strip())
        data["base_url"] = base_url
        data["system_url"] = system_url or base_url
        return data

    @classmethod
    def resolve(
        cls,
        settings: Optional[Settings] = None,
        *,
        tenant: Optional[str] = None,
        url: Optional[str] = None,
        system_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token: Optional[str] = None,
    ) -> "ConnectionContext":
        """
        Build a context from explicit parameters and default configuration.

        A non-empty explicit parameter always overrides the default value.
        When an explicit url is given without a system url, the default system
        url is not used, so both point at the explicitly requested environment.
        """
        defaults = settings if settings is not None else Settings.model_construct()

        if url and not system_url:
            system_url = url

        return cls(
            tenant_id=tenant or defaults.tenant,
            base_url=url or defaults.url,
            system_url=system_url or defaults.system_url,
            client_id=client_id or defaults.client_id,
            client_secret=client_secret or defaults.client_secret,
            token=token or None,
        )

    @property
    def has_url(self) -> bool:
        return bool(self.base_url or self.system_url)

    def describe(self) -> Dict[str, Any]:
        """Loggable view of the context, secrets excluded"""
        return {
            "tenant_id": self.tenant_id,
            "base_url": self.base_url,
            "system_url": self.system_url,
            "client_id": self.client_id,
            "has_token": self.token is not None,
        }


class MetadataResource(str, Enum):
    """Metadata collections exposed by the D365 OData endpoint"""

    PUBLIC_ENTITIES = "PublicEntities"
    PUBLIC_ENUMERATIONS = "PublicEnumerations"

    def __str__(self) -> str:
        return self.value

    @property
    def path(self) -> str:
        return f"metadata/{self.value}"

    @property
    def name_fields(self) -> tuple[str, str]:
        """Fields matched by name filters"""
        if self is MetadataResource.PUBLIC_ENTITIES:
            return ("Name", "EntitySetName")
        return ("Name", "LabelId")


class ExactName(BaseModel):
    """Case-insensitive exact match on the name fields"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exact_name"] = "exact_name"
    value: str = Field(min_length=1)


class Contains(BaseModel):
    """Case-insensitive substring match on the name fields"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["contains"] = "contains"
    value: str = Field(min_length=1)


class RawOnly(BaseModel):
    """No name filter, only the caller's OData suffix (if any)"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["raw_only"] = "raw_only"


QueryMode = Annotated[Union[ExactName, Contains, RawOnly], Field(discriminator="kind")]


def query_mode_from_parameters(
    name: Optional[str] = None, name_contains: Optional[str] = None
) -> QueryMode:
    """
    Map the mutually exclusive name parameters to a QueryMode.

    Raises:
        ConfigurationError: If both parameters are supplied
    """
    if name and name_contains:
        raise ConfigurationError(
            "The exact name and the contains text are mutually exclusive",
            search_term=name,
        )
    if name:
        return ExactName(value=name)
    if name_contains:
        return Contains(value=name_contains)
    return RawOnly()


class MetadataQuery(BaseModel):
    """A metadata lookup against one resource"""

    model_config = ConfigDict(frozen=True)

    resource: MetadataResource
    mode: QueryMode = Field(default_factory=RawOnly)
    odata_suffix: Optional[str] = None

    @property
    def search_term(self) -> str:
        """Text identifying this query in diagnostics"""
        if isinstance(self.mode, (ExactName, Contains)):
            return self.mode.value
        if self.odata_suffix:
            return self.odata_suffix
        return self.resource.value
