from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Policy switches for the ambiguous corners of the dispute rules.

    The defaults reproduce the reference ledger behavior:
    - disputes are routed by the issuing user only, without checking that the
      user owns the referenced deposit;
    - a deposit that reuses a transaction id replaces the earlier record;
    - a resolve repeats the dispute transfer (available -> held) instead of
      releasing the held funds.
    """

    model_config = ConfigDict(frozen=True)

    strict_dispute_owner: bool = False
    reject_duplicate_deposits: bool = False
    resolve_releases_funds: bool = False


class Settings(BaseSettings):
    log_level: str = "WARNING"
    strict_dispute_owner: bool = False
    reject_duplicate_deposits: bool = False
    resolve_releases_funds: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PAYMENTS_",
        extra="ignore",
    )

    def engine_config(self) -> EngineConfig:
        return EngineConfig(
            strict_dispute_owner=self.strict_dispute_owner,
            reject_duplicate_deposits=self.reject_duplicate_deposits,
            resolve_releases_funds=self.resolve_releases_funds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
