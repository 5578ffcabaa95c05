"""
Configuration management for shapesnap.

Loads YAML configuration with sensible defaults for the stroke gates,
simplification, materializer sampling, diagnostics and tracing. Sensitivity
is not configuration: callers pass it on every call.
"""

import os
from dataclasses import asdict, dataclass, field, fields, is_dataclass

import yaml


@dataclass
class SimplifyConfig:
    """Configuration for stroke point simplification."""
    min_dist_floor: float = 1.5
    width_factor: float = 0.5  # min spacing = max(floor, width * factor)


@dataclass
class GateConfig:
    """Configuration for the checks a stroke must pass before fitting."""
    min_points: int = 10
    min_diagonal: float = 12.0


@dataclass
class MaterializeConfig:
    """Configuration for regenerating display polylines."""
    circle_samples: int = 120
    parabola_samples: int = 140


@dataclass
class DiagnosticsConfig:
    """Configuration for per-estimator diagnostics."""
    enabled: bool = False
    max_points: int = 160


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    simplify: SimplifyConfig = field(default_factory=SimplifyConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    materialize: MaterializeConfig = field(default_factory=MaterializeConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    default_sensitivity: int = 50


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = EngineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """
    Merge YAML data into config dataclass, ignoring unknown keys.

    Sections only accept mappings; an empty or scalar section value (a
    section whose keys are all commented out loads as None) leaves the
    defaults in place. Top-level scalars only replace scalar fields.
    """
    if not isinstance(yaml_data, dict):
        return config

    for section in fields(config):
        if section.name not in yaml_data:
            continue

        value = yaml_data[section.name]
        current = getattr(config, section.name)
        if is_dataclass(current):
            if isinstance(value, dict):
                for key, sub_value in value.items():
                    if hasattr(current, key):
                        setattr(current, key, sub_value)
        elif value is not None and not isinstance(value, (dict, list)):
            setattr(config, section.name, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(EngineConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
