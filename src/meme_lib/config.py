import json
import os
from pathlib import Path
from typing import Any

from dishka import Provider, Scope
from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .observability.config import ObservabilityConfig


def layered(*names: str, **kwargs: Any) -> Any:
    """Field resolved from the first of ``names`` that is set.

    Names containing ``:`` address a section of the JSON settings file,
    everything else is an environment variable.
    """

    return Field(json_schema_extra={"lookup": list(names)}, **kwargs)


def _flatten_sections(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}:{key}" if prefix else key
        if isinstance(value, dict):
            flat |= _flatten_sections(value, name)
        else:
            flat[name] = value
    return flat


class LayeredSettingsSource(PydanticBaseSettingsSource):
    """Settings source for fields declared with :func:`layered`.

    ``{"AWS": {"BucketName": "memes"}}`` in the settings file is addressed as
    ``AWS:BucketName``.
    """

    def __init__(
        self, settings_cls: type[BaseSettings], json_file: Path | str | None = None
    ) -> None:
        super().__init__(settings_cls)
        self._file_values: dict[str, Any] = {}

        if json_file is not None and Path(json_file).is_file():
            with open(json_file, encoding="utf-8") as f:
                self._file_values = _flatten_sections(json.load(f))

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        extra = field.json_schema_extra
        names = extra.get("lookup", []) if isinstance(extra, dict) else []

        for name in names:
            if ":" in name:
                value = self._file_values.get(name)
            else:
                value = os.environ.get(name)

            if value is not None:
                return value, name, False

        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, _, _ = self.get_field_value(field, field_name)
            if value is not None:
                data[field_name] = value
        return data


class LayeredSettings(BaseSettings):
    """Settings whose fields are all resolved by :class:`LayeredSettingsSource`."""

    model_config = SettingsConfigDict(json_file="appsettings.json")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            LayeredSettingsSource(settings_cls, cls.model_config.get("json_file")),  # type: ignore[arg-type]
        )


class BaseAppConfig(BaseSettings):
    observability: ObservabilityConfig = ObservabilityConfig()

    model_config = SettingsConfigDict(
        env_prefix="app__",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def dishka_provider(self) -> Provider:
        """Expose the config and each of its sections as APP-scoped dependencies."""
        provider = Provider(scope=Scope.APP)

        def make_getter(v):
            def get_value():
                return v

            get_value.__annotations__["return"] = type(v)

            return get_value

        provider.provide(make_getter(self))

        for value in self.__dict__.values():
            if isinstance(value, BaseModel):
                provider.provide(make_getter(value))

        return provider
