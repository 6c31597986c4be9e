"""Configuration management for the idol agency simulation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class SimulationSettings:
    """Weekly engine tuning knobs."""
    chart_size: int = 200
    show_eligibility_weeks: int = 8
    show_candidates: int = 3
    show_score_basis: float = 10000.0
    broadcast_max: float = 2000.0
    fandom_win_bonus: int = 200
    weak_leader_streams: int = 1_000_000
    bot_base_chance: float = 0.05
    bot_dormant_weeks: int = 20
    bot_dormant_bonus: float = 0.2
    bot_opportunist_weeks: int = 10
    bot_opportunist_bonus: float = 0.3
    bot_trend_chance: float = 0.4
    viral_video_threshold: int = 2000


@dataclass
class EconomySettings:
    """Money, votes and idol upkeep."""
    starting_money: int = 50_000_000
    physical_unit_price: int = 1500
    stream_royalty: float = 0.15
    maintenance_base: int = 500_000
    maintenance_per_member: int = 100_000
    weekly_fan_votes: int = 100
    energy_recovery: int = 20
    stress_relief: int = 10
    scout_cost: int = 1_000_000
    training_cost: int = 100_000


@dataclass
class ContentSettings:
    """Content generation (Gemini) API settings."""
    api_key_env_var: str = "GEMINI_API_KEY"
    model: str = "gemini-2.5-flash"
    api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 20.0
    max_attempts: int = 2

    @property
    def api_key(self) -> Optional[str]:
        return os.environ.get(self.api_key_env_var)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class Settings:
    """Application settings."""
    simulation: SimulationSettings = field(default_factory=SimulationSettings)
    economy: EconomySettings = field(default_factory=EconomySettings)
    content: ContentSettings = field(default_factory=ContentSettings)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from YAML configuration file."""
    if config_path is None:
        config_path = Path(__file__).parent.parent / "config" / "settings.yaml"

    if not config_path.exists():
        return Settings()

    with config_path.open() as f:
        data = yaml.safe_load(f) or {}

    simulation_data = data.get("simulation", {})
    economy_data = data.get("economy", {})
    content_data = data.get("content", {})

    return Settings(
        simulation=SimulationSettings(**simulation_data),
        economy=EconomySettings(**economy_data),
        content=ContentSettings(**content_data),
    )


# Global settings instance
settings = load_settings()
