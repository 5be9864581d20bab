# ipjournal/config.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Type, Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ipjournal.errors import ConfigError
from ipjournal.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_CONFIG_FILE = "appsettings.json"

REQUIRED_KEYS = ("file-log", "file-output")


class JournalSettings(BaseSettings):
    """
    Run settings. Sources, highest priority first:
      1) keyword arguments (command-line values)
      2) JSON settings file (`appsettings.json` in the working directory by default)
    Keys use the command-line spelling (`file-log`, `address-mask`, ...).
    """
    model_config = SettingsConfigDict(
        json_file=DEFAULT_CONFIG_FILE,
        json_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    file_log: str = Field(alias="file-log")
    file_output: str = Field(alias="file-output")
    address_start: Optional[str] = Field(None, alias="address-start")
    address_mask: Optional[str] = Field(None, alias="address-mask")
    time_start: Optional[str] = Field(None, alias="time-start")
    time_end: Optional[str] = Field(None, alias="time-end")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Optional[str]:
        # JSON numbers are accepted for the mask length
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, JsonConfigSettingsSource(settings_cls))


def _settings_for(config_file: Path) -> Type[JournalSettings]:
    return type(
        "JournalSettings",
        (JournalSettings,),
        {"__module__": __name__, "model_config": SettingsConfigDict(json_file=config_file)},
    )


def load_settings(
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        config_file: Optional[Union[str, Path]] = None,
) -> JournalSettings:
    """
    Build JournalSettings from command-line `overrides` and a JSON file.

    An override of None means "not given" and falls through to the file; an
    empty string is a value and clears whatever the file sets. A missing
    default file is fine, an explicitly named one must exist.
    """
    settings_cls: Type[JournalSettings] = JournalSettings
    if config_file is not None:
        path = Path(config_file).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}", param="config")
        settings_cls = _settings_for(path)

    given = {k: v for k, v in (overrides or {}).items() if v is not None}
    try:
        settings = settings_cls(**given)
    except ValidationError as e:
        for err in e.errors():
            key = str(err["loc"][0]).replace("_", "-") if err["loc"] else ""
            if key in REQUIRED_KEYS:
                raise ConfigError(f"Parameter --{key} is required.", param=key) from None
        raise ConfigError(f"Invalid settings: {e}", param="config") from e
    except ValueError as e:
        raise ConfigError(f"Could not read config file: {e}", param="config") from e

    log.debug("Settings: %s", settings.model_dump(by_alias=True))
    return settings
