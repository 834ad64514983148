"""Remote source configuration and process-wide defaults.

Source settings are immutable once loaded. Defaults can be overridden per
source through environment variables (a ``.env`` file works too, since the CLI
calls ``load_dotenv``):

    CHEMRESOLVE_PUBCHEM_TIMEOUT=10
    CHEMRESOLVE_CACTUS_MAX_RETRIES=0
    CHEMRESOLVE_CACTUS_ENABLED=false
    CHEMRESOLVE_CACHE_TTL=600

Recognized per-source suffixes: BASE_URL, PRIORITY, TIMEOUT, MAX_RETRIES, ENABLED.
"""

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 60 * 60.0  # 1 hour, in seconds
DEFAULT_USER_AGENT = "chemresolve/0.1.0 (chemical identifier resolver)"

ENV_PREFIX = "CHEMRESOLVE_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class RemoteSourceConfig(BaseModel):
    """Settings for one remote resolver.

    Attributes:
        name: Source label reported in results (e.g., "PubChem")
        base_url: Root endpoint of the service
        priority: Higher priorities are tried first
        timeout: Per-attempt timeout in seconds
        max_retries: Extra attempts after the first failure
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    base_url: str
    priority: int = Field(..., ge=0)
    timeout: float = Field(..., gt=0)
    max_retries: int = Field(0, ge=0)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


PUBCHEM_SOURCE = RemoteSourceConfig(
    name="PubChem",
    base_url="https://pubchem.ncbi.nlm.nih.gov/rest/pug",
    priority=10,
    timeout=5.0,
    max_retries=2,
)

CACTUS_SOURCE = RemoteSourceConfig(
    name="NCI/CACTUS",
    base_url="https://cactus.nci.nih.gov/chemical/structure",
    priority=6,
    timeout=7.0,
    max_retries=1,
)

DEFAULT_SOURCES: tuple[RemoteSourceConfig, ...] = (PUBCHEM_SOURCE, CACTUS_SOURCE)

# Environment key fragment for each default source
SOURCE_ENV_KEYS = {
    PUBCHEM_SOURCE.name: "PUBCHEM",
    CACTUS_SOURCE.name: "CACTUS",
}


def _parse_bool(text: str) -> bool:
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got {text!r}")


def _apply_overrides(config: RemoteSourceConfig, env_key: str, env: Mapping[str, str]) -> RemoteSourceConfig | None:
    """Return the config with env overrides applied, or None if disabled."""
    prefix = f"{ENV_PREFIX}{env_key}_"
    enabled = env.get(f"{prefix}ENABLED")
    if enabled is not None and not _parse_bool(enabled):
        logger.info(f"Remote source {config.name} disabled by {prefix}ENABLED")
        return None

    updates: dict[str, str] = {}
    for field_name in ("base_url", "priority", "timeout", "max_retries"):
        value = env.get(f"{prefix}{field_name.upper()}")
        if value is not None:
            updates[field_name] = value
    if not updates:
        return config
    # Re-validate so bad overrides fail at startup
    return RemoteSourceConfig.model_validate({**config.model_dump(), **updates})


def load_source_configs(env: Mapping[str, str] | None = None) -> list[RemoteSourceConfig]:
    """Load remote source settings, applying environment overrides.

    Args:
        env: Mapping to read overrides from (defaults to os.environ)

    Returns:
        Enabled sources ordered by descending priority

    Raises:
        pydantic.ValidationError: If an override has an invalid value
        ValueError: If an ENABLED flag is not a boolean
    """
    environ = os.environ if env is None else env
    configs = []
    for config in DEFAULT_SOURCES:
        updated = _apply_overrides(config, SOURCE_ENV_KEYS[config.name], environ)
        if updated is not None:
            configs.append(updated)
    return sorted(configs, key=lambda c: c.priority, reverse=True)


def cache_ttl_from_env(env: Mapping[str, str] | None = None) -> float:
    """Read the cache TTL in seconds from CHEMRESOLVE_CACHE_TTL."""
    environ = os.environ if env is None else env
    value = environ.get(f"{ENV_PREFIX}CACHE_TTL")
    if value is None:
        return DEFAULT_CACHE_TTL
    ttl = float(value)
    if ttl <= 0:
        raise ValueError(f"{ENV_PREFIX}CACHE_TTL must be positive, got {value!r}")
    return ttl
