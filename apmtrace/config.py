"""Tracer configuration: TOML file, environment and keyword overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from apmtrace.deployment import DEFAULT_META_DATA, DeploymentMetaData
from apmtrace.errors import ConfigError
from apmtrace.exporter.recorders import ConsoleRecorder, LoggingRecorder, Recorder
from apmtrace.processors.sampler import AlwaysSample, NeverSample, PercentageSampler, Sampler

if TYPE_CHECKING:
    from apmtrace.tracer.tracer import Tracer

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "apmtrace.toml"

ENV_OVERRIDES = {
    "APMTRACE_RECORDER": ("recorder", "type"),
    "APMTRACE_SAMPLER": ("sampler", "type"),
    "APMTRACE_SAMPLE_PERCENTAGE": ("sampler", "percentage"),
    "APMTRACE_SERVICE_NAME": ("deployment", "service_name"),
    "APMTRACE_BUILD_STAMP": ("deployment", "build_stamp"),
}


class RecorderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["console", "logging"] = "console"


class SamplerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["always", "never", "percentage"] = "always"
    percentage: float = Field(default=100.0, ge=0.0, le=100.0)


class DeploymentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_name: Optional[str] = None
    build_stamp: Optional[str] = None


class TracerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recorder: RecorderConfig = Field(default_factory=RecorderConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)


def find_config_file() -> Optional[str]:
    """Look for apmtrace.toml in the current directory, then the home directory."""
    for directory in (Path.cwd(), Path.home()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: if the file is not valid TOML
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("Invalid TOML config file", {"path": path, "error": str(e)}) from e


def _env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    env = os.environ if environ is None else environ
    overrides: Dict[str, Dict[str, Any]] = {}
    for name, (section, key) in ENV_OVERRIDES.items():
        value = env.get(name)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for section, values in extra.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged


def load_config(
    path: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Dict[str, Any],
) -> TracerConfig:
    """
    Build a TracerConfig.

    Priority (highest first): keyword overrides, environment variables,
    config file (``path`` or the discovered apmtrace.toml).

    Raises:
        ConfigError: if the file or the merged values are invalid
    """
    config_path = path or find_config_file()
    data = load_toml_config(config_path) if config_path else {}
    if config_path and data:
        logger.debug("Loaded tracer config from %s", config_path)
    data = _merge(data, _env_overrides(environ))
    data = _merge(data, overrides)
    return validate_config(data)


def validate_config(data: Dict[str, Any]) -> TracerConfig:
    try:
        return TracerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError("Invalid tracer configuration", {"errors": e.error_count()}) from e


def build_sampler(config: SamplerConfig) -> Sampler:
    if config.type == "never":
        return NeverSample()
    if config.type == "percentage":
        return PercentageSampler(config.percentage)
    return AlwaysSample()


def build_recorder(config: RecorderConfig) -> Recorder:
    if config.type == "logging":
        return LoggingRecorder()
    return ConsoleRecorder()


def build_deployment_meta_data(config: DeploymentConfig) -> DeploymentMetaData:
    """Configured values, falling back field by field to the environment defaults."""
    return DeploymentMetaData(
        service_name=config.service_name or DEFAULT_META_DATA.service_name,
        build_stamp=config.build_stamp or DEFAULT_META_DATA.build_stamp,
    )


def build_tracer(config: Optional[TracerConfig] = None, **kwargs: Any) -> "Tracer":
    """
    Create a Tracer from configuration.

    Keyword arguments are passed to the Tracer and take precedence over the
    collaborators built from ``config``.
    """
    from apmtrace.tracer.tracer import Tracer

    config = config or load_config()
    options = {
        "recorder": build_recorder(config.recorder),
        "sampler": build_sampler(config.sampler),
        "deployment_meta_data": build_deployment_meta_data(config.deployment),
    }
    options.update(kwargs)
    return Tracer(**options)
