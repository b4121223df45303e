"""Host profiles - Named SSH targets for fwchain commands.

Profiles live in `profiles.yaml` under the config directory. Passwords are
never written there: they go to the system keyring, and a profile only
records that one is stored.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import keyring
import yaml
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import BaseModel, Field, ValidationError

from fwchain.connector.ssh import SSHConfig

logger = logging.getLogger(__name__)

SERVICE_ID = "fwchain"


class ProfileError(ValueError):
    """A host profile cannot be stored."""


class HostProfile(BaseModel):
    """One entry of profiles.yaml."""

    host: str = Field(..., min_length=1, description="Hostname or IP")
    user: str = Field("root", min_length=1)
    port: int = Field(22, ge=1, le=65535)
    key_path: Optional[str] = None
    use_sudo: bool = True
    keyring_password: bool = Field(False, description="A password is stored in the keyring")

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"

    def to_ssh_config(self, password: str | None = None) -> SSHConfig:
        return SSHConfig(
            host=self.host,
            user=self.user,
            port=self.port,
            key_path=self.key_path,
            use_sudo=self.use_sudo,
            password=password,
        )


class ConfigManager:
    """Reads and writes host profiles in `~/.fwchain` or `$FWCHAIN_CONFIG`."""

    def __init__(self, config_dir: Path | None = None) -> None:
        if config_dir is None:
            env_config = os.getenv("FWCHAIN_CONFIG")
            config_dir = Path(env_config).expanduser().resolve() if env_config else Path.home() / ".fwchain"

        self.config_dir = config_dir
        self.profiles_file = config_dir / "profiles.yaml"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        if not self.profiles_file.exists():
            self._write({})

    def _read(self) -> dict:
        try:
            with open(self.profiles_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            return {}
        except yaml.YAMLError as e:
            logger.warning("Ignoring unreadable profiles file %s: %s", self.profiles_file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring profiles file %s: expected a mapping of profiles", self.profiles_file)
            return {}
        return data

    def _write(self, raw: dict) -> None:
        self.profiles_file.touch(mode=0o600)
        with open(self.profiles_file, "w") as f:
            yaml.safe_dump(raw, f)

    def list_profiles(self) -> dict[str, HostProfile]:
        """All profiles that validate. Invalid entries are logged and skipped."""
        profiles = {}
        for name, data in self._read().items():
            try:
                profiles[str(name)] = HostProfile.model_validate(data)
            except ValidationError as e:
                logger.warning("Skipping invalid profile %r in %s: %s", name, self.profiles_file, e)
        return profiles

    def add_profile(self, name: str, config: SSHConfig) -> HostProfile:
        """Add or update a profile.

        Raises:
            ProfileError: If the profile does not validate, or a password was
                given and the keyring cannot store it.
        """
        try:
            profile = HostProfile(
                host=config.host,
                user=config.user,
                port=config.port,
                key_path=config.key_path,
                use_sudo=config.use_sudo,
                keyring_password=bool(config.password),
            )
        except ValidationError as e:
            raise ProfileError(f"Invalid profile {name!r}: {e}") from e

        if config.password:
            try:
                keyring.set_password(SERVICE_ID, name, config.password)
            except KeyringError as e:
                raise ProfileError(
                    f"Cannot store the password for {name!r} in the keyring ({e}). "
                    "Use --key instead, or configure a keyring backend."
                ) from e

        raw = self._read()
        raw[name] = profile.model_dump()
        self._write(raw)
        return profile

    def get_profile(self, name: str) -> SSHConfig | None:
        """SSHConfig for a profile, or None if there is no valid profile of that name."""
        profile = self.list_profiles().get(name)
        if profile is None:
            return None

        password = None
        if profile.keyring_password:
            try:
                password = keyring.get_password(SERVICE_ID, name)
            except KeyringError as e:
                logger.warning("Cannot read password for %s from keyring: %s", name, e)
        return profile.to_ssh_config(password)

    def remove_profile(self, name: str) -> bool:
        raw = self._read()
        if name not in raw:
            return False

        if isinstance(raw[name], dict) and raw[name].get("keyring_password"):
            try:
                keyring.delete_password(SERVICE_ID, name)
            except PasswordDeleteError:
                logger.debug("No keyring password for %s", name)
            except KeyringError as e:
                logger.warning("Cannot delete password for %s from keyring: %s", name, e)

        del raw[name]
        self._write(raw)
        return True
