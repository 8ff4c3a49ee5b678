"""
Service Settings

Environment-driven settings for the API process, plus the shared
analysis components built from them once at startup.

Every setting can be overridden with a SWINGSENSE_ prefixed environment
variable or a .env file, e.g. SWINGSENSE_METRIC_SPECS_PATH=specs.yaml.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

from swingsense.domain import AnalysisConfig, DEFAULT_CONFIG, DEFAULT_METRIC_SPECS, MetricSpecs
from swingsense.services import load_metric_specs

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "SwingSense API"
    version: str = "1.0.0"
    log_level: str = "INFO"

    # Analysis
    default_fps: float = 30.0
    metric_specs_path: Optional[str] = None

    cors_origins: List[str] = [
        "http://localhost:3000",      # React dev server
        "http://localhost:5173",      # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_prefix = "SWINGSENSE_"
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_metric_specs() -> MetricSpecs:
    """Spec table from the configured YAML file, or the built-in table."""
    path = get_settings().metric_specs_path
    if not path:
        return DEFAULT_METRIC_SPECS
    logger.info(f"Using metric specs from {path}")
    return load_metric_specs(path)


def get_analysis_config() -> AnalysisConfig:
    return DEFAULT_CONFIG
