"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

from declutter.config.defaults import DEFAULT_FILTER


class DeclutterConfig(BaseModel):
    """Repetition filter settings.

    Ranges are enforced here; the engine trusts whatever it is handed.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    enabled: bool = bool(DEFAULT_FILTER["enabled"])
    similarity_threshold: float = Field(
        default=float(DEFAULT_FILTER["similarity_threshold"]), ge=0, le=100
    )
    repetition_threshold: int = Field(default=int(DEFAULT_FILTER["repetition_threshold"]), ge=1)
    ignore_moderators: bool = bool(DEFAULT_FILTER["ignore_moderators"])
    force_enabled_for_moderators: bool = bool(DEFAULT_FILTER["force_enabled_for_moderators"])
    cache_ttl_seconds: float = Field(default=float(DEFAULT_FILTER["cache_ttl_seconds"]), gt=0)
    annotate_instead_of_hide: bool = bool(DEFAULT_FILTER["annotate_instead_of_hide"])
    annotation_color: str = str(DEFAULT_FILTER["annotation_color"])
    partition_by_author: bool = bool(DEFAULT_FILTER["partition_by_author"])


class Config(BaseSettings):
    """Root configuration for declutter."""

    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, env_prefix="DECLUTTER_", env_nested_delimiter="__"
    )

    config_version: int = 2
    filter: DeclutterConfig = Field(default_factory=DeclutterConfig)
