"""
Pydantic models for application configuration.
Provides robust validation for all settings and the declared entry tree.
"""

from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_RPC_URL = "http://localhost:9091/transmission/rpc"
DEFAULT_CONCURRENCY = 4


class Entry(BaseModel):
    """
    One node of the declared hierarchy.

    Holds the torrent sources placed directly in this group's directory and,
    optionally, named child groups that become sub-directories.
    """

    torrents: list[str] = Field(default_factory=list)
    children: Optional[dict[str, "Entry"]] = None

    class Config:
        """Pydantic model configuration."""

        extra = "forbid"

    @field_validator("torrents", mode="before")
    @classmethod
    def scalar_torrents(cls, v: Any) -> Any:
        """
        An empty YAML key (``torrents:``) parses as None, and bare numeric
        scalars (an info-hash of digits) parse as numbers.
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) if isinstance(item, (int, float)) else item for item in v]
        return v

    @field_validator("children", mode="before")
    @classmethod
    def group_names_as_text(cls, v: Any) -> Any:
        """Group names such as ``2023`` or ``1.5`` are path segments, not numbers."""
        if isinstance(v, dict):
            return {str(name): child for name, child in v.items()}
        return v


class LoaderConfig(BaseModel):
    """A validated configuration model for the application."""

    # Connection & Authentication
    url: str = DEFAULT_RPC_URL
    username: Optional[str] = None
    password: Optional[str] = None

    # Submission Settings
    concurrency: int = DEFAULT_CONCURRENCY

    root: Entry

    # Internal field not loaded from the YAML file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        extra = "forbid"
        validate_assignment = True

    @field_validator("url", mode="before")
    @classmethod
    def default_url(cls, v: Any) -> Any:
        return DEFAULT_RPC_URL if v is None else v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensures the RPC endpoint is an absolute http(s) URL."""
        v = v.strip()
        try:
            parts = urlsplit(v)
        except ValueError as e:
            raise ValueError(f"RPC URL could not be parsed: {e}") from e
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(
                f"RPC URL must be an absolute http(s) URL, but got: {v!r}"
            )
        return v

    @field_validator("concurrency", mode="before")
    @classmethod
    def default_concurrency(cls, v: Any) -> Any:
        """Treats a missing value as the default concurrency."""
        return DEFAULT_CONCURRENCY if v is None else v

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """0 means the default; negative values are rejected."""
        if v == 0:
            return DEFAULT_CONCURRENCY
        if v < 0:
            raise ValueError("Concurrency must be a positive number (or 0 for default).")
        return v

    @model_validator(mode="after")
    def validate_credentials(self) -> "LoaderConfig":
        """Basic auth is enabled only when both username and password are set."""
        if (self.username is None) != (self.password is None):
            raise ValueError(
                "Authentication is incomplete. Provide both 'username' and "
                "'password', or neither."
            )
        return self

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None
