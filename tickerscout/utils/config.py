import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

from tickerscout.models.rating import ScoringWeights

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"


class PipelineSettings(BaseModel):
    """Knobs for the rating fetch and ranking stages."""
    batch_size: int = Field(default=5, ge=1)
    batch_delay_seconds: float = Field(default=0.2, ge=0)
    top_picks_count: int = Field(default=5, ge=0)
    request_timeout: float = 30.0  # Seconds, for YouTube page fetches
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the YAML configuration.

    The path comes from the argument, then the CONFIG_PATH environment
    variable, then config/config.yaml at the project root. Startup cannot
    continue without it, so any failure exits the process.
    """
    path = config_path or os.getenv("CONFIG_PATH", str(DEFAULT_CONFIG_PATH))
    try:
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
            if not cfg:
                raise ValueError("Config file is empty or invalid.")
            return cfg
    except FileNotFoundError:
        logging.error(f"❌ Config not found at {path}")
        raise SystemExit(f"Config not found: {path}")
    except yaml.YAMLError as e:
        logging.error(f"❌ Error parsing {path}: {e}")
        raise SystemExit(f"Error parsing config: {e}")
    except Exception as e:
        logging.error(f"❌ Unexpected error loading config: {e}")
        raise SystemExit(f"Failed to load config: {e}")


def build_pipeline_settings(config: Dict[str, Any]) -> PipelineSettings:
    ratings_cfg = config.get("ratings") or {}
    youtube_cfg = config.get("youtube") or {}
    return PipelineSettings(
        batch_size=ratings_cfg.get("batch_size", 5),
        batch_delay_seconds=ratings_cfg.get("batch_delay_seconds", 0.2),
        top_picks_count=ratings_cfg.get("top_picks_count", 5),
        request_timeout=youtube_cfg.get("request_timeout", 30.0),
        scoring=ScoringWeights(**(config.get("scoring") or {})),
    )


# --- Settings shared with the API layer ---
_pipeline_settings: Optional[PipelineSettings] = None


def init_pipeline_settings(config: Dict[str, Any]) -> PipelineSettings:
    global _pipeline_settings
    _pipeline_settings = build_pipeline_settings(config)
    return _pipeline_settings


async def get_pipeline_settings() -> PipelineSettings:
    """FastAPI dependency returning the pipeline settings, loading config on first use."""
    if _pipeline_settings is None:
        return init_pipeline_settings(load_config())
    return _pipeline_settings
