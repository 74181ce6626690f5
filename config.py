"""
Configuration loaded from the environment (and an optional .env file).
"""
import logging
import os
from datetime import datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when required settings are missing or invalid."""


def system_zone() -> tzinfo:
    """
    The machine's IANA zone, so DST changes are honoured.

    Looks at TZ, then the /etc/localtime symlink, and falls back to the
    current fixed UTC offset when neither names a known zone.
    """
    name = os.getenv("TZ", "").lstrip(":")
    if not name:
        localtime = Path("/etc/localtime")
        if localtime.is_symlink():
            target = str(localtime.resolve())
            if "zoneinfo/" in target:
                name = target.split("zoneinfo/", 1)[1]
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("System zone %r not found, using fixed offset", name)
    return datetime.now().astimezone().tzinfo


def parse_organizations(value: str) -> list[str]:
    """Split a comma-separated org list, dropping blanks and duplicates."""
    result = []
    for org in value.split(","):
        org = org.strip()
        if org and org not in result:
            result.append(org)
    return result


class Settings(BaseModel):
    """Process-wide settings, passed explicitly into the pipeline."""
    model_config = ConfigDict(frozen=True)

    github_token: str
    organizations: list[str] = Field(min_length=1)
    port: int = 8080
    timezone: str | None = Field(default=None, description="IANA zone name; system local when unset")
    runs_per_repo: int = 50
    static_dir: str = "static"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            dotenv: Load a .env file first, if one exists

        Raises:
            ConfigError: GITHUB_TOKEN or GITHUB_ORG missing, or values invalid
        """
        if dotenv:
            load_dotenv()

        token = os.getenv("GITHUB_TOKEN")
        if not token:
            raise ConfigError("GITHUB_TOKEN environment variable is required")

        org_env = os.getenv("GITHUB_ORG")
        if not org_env:
            raise ConfigError("GITHUB_ORG environment variable is required (can be comma-separated for multiple orgs)")

        organizations = parse_organizations(org_env)
        if not organizations:
            raise ConfigError("At least one organization must be specified in GITHUB_ORG")

        try:
            port = int(os.getenv("PORT") or 8080)
            runs_per_repo = int(os.getenv("RUNS_PER_REPO") or 50)
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        settings = cls(
            github_token=token,
            organizations=organizations,
            port=port,
            timezone=os.getenv("DASHBOARD_TIMEZONE") or None,
            runs_per_repo=runs_per_repo,
            static_dir=os.getenv("STATIC_DIR") or "static",
        )
        settings.zone()  # fail fast on an unknown zone
        return settings

    def zone(self) -> tzinfo | None:
        """Reference timezone, or None for the system local zone."""
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone}") from e

    def reference_zone(self) -> tzinfo:
        """Configured zone, or the system zone when none is set."""
        return self.zone() or system_zone()

    def now(self) -> datetime:
        """Current aware instant in the reference timezone."""
        return datetime.now(self.reference_zone())
