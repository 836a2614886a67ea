"""Runtime configuration state management."""

from pydantic import Field, PositiveInt, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from spanflow.errors import ConfigError

DEFAULT_SERVICE_NAME = "unnamed-python-service"


class SpanflowSettings(BaseSettings):
    """Settings read from SPANFLOW_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="SPANFLOW_", case_sensitive=False, extra="ignore")

    service_name: str = Field(default=DEFAULT_SERVICE_NAME, min_length=1)
    debug: bool = False
    analytics_enabled: bool = False
    max_queue_size: PositiveInt = 1000
    max_export_batch_size: PositiveInt = 100
    schedule_delay_millis: PositiveInt = 1000


_DEFAULTS = SpanflowSettings.model_construct().model_dump()

# Global runtime configuration state
_config = dict(_DEFAULTS)

_positive_int = TypeAdapter(PositiveInt)


def reset() -> None:
    """Restore every setting to its default."""
    _config.clear()
    _config.update(_DEFAULTS)


def set_service_name(value: str) -> None:
    if not value:
        raise ConfigError("service_name must be a non-empty string")
    _config["service_name"] = value


def get_service_name() -> str:
    return _config["service_name"]


def set_debug(value: bool) -> None:
    _config["debug"] = value


def get_debug() -> bool:
    return _config["debug"]


def set_analytics_enabled(value: bool) -> None:
    _config["analytics_enabled"] = value


def get_analytics_enabled() -> bool:
    return _config["analytics_enabled"]


def set_max_queue_size(value: int) -> None:
    _config["max_queue_size"] = _validate_positive("max_queue_size", value)


def get_max_queue_size() -> int:
    return _config["max_queue_size"]


def set_max_export_batch_size(value: int) -> None:
    _config["max_export_batch_size"] = _validate_positive("max_export_batch_size", value)


def get_max_export_batch_size() -> int:
    return _config["max_export_batch_size"]


def set_schedule_delay_millis(value: int) -> None:
    _config["schedule_delay_millis"] = _validate_positive("schedule_delay_millis", value)


def get_schedule_delay_millis() -> int:
    return _config["schedule_delay_millis"]


def load_from_env() -> SpanflowSettings:
    """
    Apply settings from SPANFLOW_* environment variables.

    Unset variables leave the current value alone.

    Raises:
        ConfigError: if a variable is set to a value that cannot be parsed
    """
    try:
        settings = SpanflowSettings()
    except ValidationError as e:
        raise ConfigError("Invalid SPANFLOW_* environment settings", {"errors": _describe(e)}) from e

    for name in settings.model_fields_set:
        _config[name] = getattr(settings, name)
    return settings


def _validate_positive(name: str, value: int) -> int:
    try:
        return _positive_int.validate_python(value, strict=True)
    except ValidationError as e:
        raise ConfigError(f"{name} must be a positive integer", {"value": value}) from e


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )
