"""HTTP driver configuration."""

from pydantic_settings import SettingsConfigDict

from src.shared.config import BaseOgmSettings


class HttpDriverSettings(BaseOgmSettings):
    """Settings specific to the transactional HTTP driver.

    ``model_config`` merges with the base, so ``.env`` is still read.
    """

    model_config = SettingsConfigDict(env_prefix="OGM_HTTP_")

    user_agent: str = "neo4j-ogm.py/1.0"
    request_timeout: float = 30.0
    transaction_path: str = "db/data/transaction"
