"""Configuration objects and constants for the board agent."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the board agent.

    Values can be overridden through environment variables with the
    ``PASITHEA_`` prefix or via a local ``.env`` file. The API key is also
    read from ``GITHUB_TOKEN`` since the default endpoint is GitHub Models.
    """

    model_config = SettingsConfigDict(
        env_prefix="PASITHEA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PASITHEA_API_KEY", "GITHUB_TOKEN"),
        description="Credential used to authenticate with the chat completion endpoint.",
    )
    base_url: str = Field(
        default="https://models.inference.ai.azure.com",
        description="Base URL for the OpenAI compatible chat completion API.",
    )
    agent_model: str = Field(
        default="gpt-4o-mini",
        description="Model identifier used for language model invocations.",
    )
    temperature: float = Field(
        default=0.7,
        description="Sampling temperature for the board assistant.",
    )
    recursion_limit: int = Field(
        default=25,
        description="Maximum number of graph steps for a single user request.",
    )
    workspace: Path = Field(
        default_factory=lambda: Path.cwd(),
        description="Workspace root where the replica file is stored.",
    )
    replica_file: str = Field(
        default=".pasithea/replica.json",
        description="Workspace-relative path of the persisted board replica.",
    )
    project_name: str = Field(
        default="Pasithea",
        description="Project name shown on the board.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level for the board_agent logger tree.",
    )
    max_tool_result_chars: int = Field(
        default=2000,
        description="Maximum number of characters echoed to the console per tool call.",
    )
    read_reminder_rounds: int = Field(
        default=3,
        description="Model rounds without get_issues before the agent is reminded to re-read the board.",
    )


settings = Settings()
