"""Datasource configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEBHOOK_DATASOURCE_TYPE = "Webhook"


class WebhookConfig(BaseModel):
    """Webhook-specific datasource settings."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    field_mapping: dict[str, str] = Field(
        default_factory=dict,
        alias="fieldMapping",
        description="Source field name -> target field name (labels.<key> nests into labels)",
    )
    fingerprint_fields: list[str] = Field(
        default_factory=list,
        alias="fingerprintFields",
        description="Source fields used for fingerprinting (empty uses all fields)",
    )

    @field_validator("fingerprint_fields")
    @classmethod
    def _dedupe_fields(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class Datasource(BaseModel):
    """A configured alert datasource."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    tenant_id: str = Field(default="", alias="tenantId")
    name: str = ""
    type: str
    enabled: bool = True
    webhook_config: WebhookConfig | None = Field(default=None, alias="webhookConfig")


class DatasourcesConfig(BaseModel):
    """Complete datasource configuration."""

    datasources: list[Datasource] = Field(default_factory=list)
