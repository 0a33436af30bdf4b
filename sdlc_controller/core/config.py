"""Configuration management for the SDLC Controller."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

DEFAULT_ANALYZER_CONFIG_PATH = "config/analyzer.yaml"


class PriorityWeights(BaseModel):
    """Score contributed by each priority level."""
    P0: float = 100
    P1: float = 75
    P2: float = 50
    P3: float = 25

    @model_validator(mode="after")
    def check_monotonic(self) -> "PriorityWeights":
        if not (self.P0 > self.P1 > self.P2 > self.P3):
            raise ValueError("priority weights must be strictly decreasing from P0 to P3")
        return self

    def weight_for(self, priority) -> float:
        """Weight for a Priority member or its "P0".."P3" label."""
        return getattr(self, getattr(priority, "value", priority))


class AnalyzerConfig(BaseModel):
    """Weights, bonuses and thresholds used by the priority scorer."""
    weights: PriorityWeights = Field(default_factory=PriorityWeights)
    critical_path_bonus: float = 50
    dependent_multiplier: float = 10
    quick_win_bonus: float = 15
    quick_win_threshold: float = Field(default=4, ge=0)


class AppConfig(BaseModel):
    """Application configuration."""
    host: str = "0.0.0.0"
    port: int = 5230
    log_level: str = "INFO"
    analyzer_config_path: str = DEFAULT_ANALYZER_CONFIG_PATH


def load_analyzer_config(config_path: Optional[str] = None) -> AnalyzerConfig:
    """Load analyzer configuration from a YAML file.

    When no path is given, ``ANALYZER_CONFIG_PATH`` is used, and a missing
    file at that location falls back to the built-in defaults. An explicit
    path that does not exist is an error.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = os.getenv("ANALYZER_CONFIG_PATH", DEFAULT_ANALYZER_CONFIG_PATH)

    path = Path(config_path)
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Analyzer config not found: {config_path}")
        return AnalyzerConfig()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow the settings to live under a top-level "analyzer" key
    data = data.get("analyzer", data)
    return AnalyzerConfig(**data)


def load_app_config() -> AppConfig:
    """Load application configuration from environment variables."""
    return AppConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5230")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        analyzer_config_path=os.getenv("ANALYZER_CONFIG_PATH", DEFAULT_ANALYZER_CONFIG_PATH),
    )
