"""
Base configuration shared by the driver and the console entry point.

Uses Pydantic Settings for environment-based configuration.
Each component extends BaseOgmSettings with its own prefix.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseOgmSettings(BaseSettings):
    """Base settings shared by every component that talks to Neo4j."""

    # Neo4j connection (HTTP endpoint, not bolt)
    neo4j_uri: str = "http://localhost:7474"
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")
