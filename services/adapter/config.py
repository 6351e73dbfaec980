"""
Adapter configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

from typing import List, Literal

from pydantic import Field

from services.common.core.config import BaseAppConfig


class AdapterConfig(BaseAppConfig):
    """
    Configuration management for the proxy adapter.
    """

    LOG_CONFIG_PATH: str = Field(
        default="/app/config/adapter_log.yaml", description="YAML logging configuration file path"
    )

    # Response encoding
    DEFAULT_RESPONSE_CONTENT_ENCODING: Literal["DEFAULT", "BASE64"] = Field(
        default="DEFAULT",
        description="Encoding for response content types not found in the registry",
    )
    BINARY_CONTENT_TYPES: List[str] = Field(
        default_factory=list, description="Extra content types returned Base64-encoded"
    )
    TEXT_CONTENT_TYPES: List[str] = Field(
        default_factory=list, description="Extra content types returned as UTF-8 text"
    )

    # Invocation
    DEFAULT_STATUS_CODE: int = Field(
        default=200, ge=100, le=599, description="Status code when the application sets none"
    )
    RETHROW_UNHANDLED_ERROR: bool = Field(
        default=False,
        description="Re-raise processor failures after logging instead of returning a 500",
    )

    # model_config is inherited
