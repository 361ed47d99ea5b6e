from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from ..schemas.base import BaseSchema
from ..transport.retry import RetryPolicy


class ServiceConfig(BaseSchema):
    """Connection settings shared by both MoviePilot integration variants.

    Populated from the host's ``services.moviepilot`` block (camelCase keys).
    Frozen once validated.
    """

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the MoviePilot service. Absence disables the integration.",
        examples=["http://localhost:3000"],
    )
    api_key: Optional[str] = Field(default=None, description="API key sent according to api_key_mode.")
    api_key_header: str = Field(default="X-API-KEY", min_length=1, description="Header name for header mode.")
    api_key_query_param: str = Field(default="apikey", min_length=1, description="Query param name for query mode.")
    timeout_ms: int = Field(default=15000, ge=1, description="Per-attempt request timeout in milliseconds.")
    retries: int = Field(default=1, ge=0, description="Retries on transport failure or 5xx.")
    debug: bool = Field(default=False, description="Log a summary line after registration.")

    @field_validator("*", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        # An explicit null in the host config behaves like an absent key.
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(timeout_ms=self.timeout_ms, retries=self.retries)


class McpServiceConfig(ServiceConfig):
    api_key_mode: Literal["header", "query", "none"] = Field(default="header")
    endpoint_path: Optional[str] = Field(
        default=None,
        description="Path of the JSON-RPC endpoint, resolved against base_url.",
        examples=["/api/v1/mcp"],
    )
    tool_prefix: Optional[str] = Field(default=None, description="Prefix for published tool names.")
    expose: List[str] = Field(
        default_factory=list,
        description="Allow-list of raw, mapped or normalized tool names. Empty publishes everything.",
    )
    optional_tools: List[str] = Field(
        default_factory=list,
        description="Tools (raw, mapped or normalized names) to register as optional.",
    )


class EndpointOverride(BaseSchema):
    model_config = ConfigDict(frozen=True)

    path: Optional[str] = Field(default=None, min_length=1)
    method: Optional[str] = Field(default=None, min_length=1)


class RestServiceConfig(ServiceConfig):
    api_key_mode: Literal["header", "query", "bearer", "none"] = Field(default="header")
    endpoints: Dict[str, EndpointOverride] = Field(
        default_factory=dict,
        description="Per-operation path/method overrides keyed by operation name (e.g. 'searchMedia').",
    )
