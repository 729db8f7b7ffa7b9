"""
Configuration management for the Cosmo UI engine.

Centralized configuration with:
- Type safety
- Environment variable support (.env files are honored)
- Validation
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Any

from dotenv import load_dotenv

from cosmo_ui.exceptions import InvalidConfigError

load_dotenv()


# Per-family capacity defaults
DEFAULT_MAX_HUD_CARDS = 5
DEFAULT_MAX_CONTEXT_BADGES = 8
DEFAULT_MAX_PROGRESS_RINGS = 6
DEFAULT_MAX_STATUS_INDICATORS = 10


@dataclass
class RegistryConfig:
    """Capacity of each lifecycle registry"""
    max_hud_cards: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_HUD_CARDS', str(DEFAULT_MAX_HUD_CARDS))))
    max_context_badges: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_CONTEXT_BADGES', str(DEFAULT_MAX_CONTEXT_BADGES))))
    max_progress_rings: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_PROGRESS_RINGS', str(DEFAULT_MAX_PROGRESS_RINGS))))
    max_status_indicators: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_STATUS_INDICATORS', str(DEFAULT_MAX_STATUS_INDICATORS))))

    def as_capacities(self) -> Dict[str, int]:
        """Capacities keyed by family tag value."""
        return {
            'HUDCard': self.max_hud_cards,
            'ContextBadge': self.max_context_badges,
            'ProgressRing': self.max_progress_rings,
            'StatusIndicator': self.max_status_indicators,
        }


@dataclass
class GenerationConfig:
    """Configuration for the generation retry loop."""
    max_retries: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_RETRIES', '2')))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv('COSMO_GENERATION_TIMEOUT', '60')))
    max_parallel_generations: int = field(default_factory=lambda: int(os.getenv('COSMO_MAX_PARALLEL_GENERATIONS', '4')))


@dataclass
class AIConfig:
    """AI model configuration"""
    provider: str = field(default_factory=lambda: os.getenv('AI_PROVIDER', 'openai'))
    model: str = field(default_factory=lambda: os.getenv('AI_MODEL', 'gpt-4o-mini'))
    temperature: float = field(default_factory=lambda: float(os.getenv('AI_TEMPERATURE', '0.7')))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('AI_MAX_TOKENS', '500')))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))


@dataclass
class Config:
    """Master configuration"""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'registry': self.registry.as_capacities(),
            'generation': {
                'max_retries': self.generation.max_retries,
                'timeout_seconds': self.generation.timeout_seconds,
                'max_parallel_generations': self.generation.max_parallel_generations,
            },
            'ai': {
                'provider': self.ai.provider,
                'model': self.ai.model,
                'temperature': self.ai.temperature,
                'max_tokens': self.ai.max_tokens,
            },
            'logging': {
                'level': self.logging.level,
            },
        }

    def validate(self) -> None:
        """Validate configuration values"""
        for family, capacity in self.registry.as_capacities().items():
            if capacity < 1:
                raise InvalidConfigError(
                    f"maxConcurrent for {family} must be at least 1, got {capacity}",
                    context={'family': family},
                )

        if self.generation.max_retries < 0:
            raise InvalidConfigError(f"max_retries must be >= 0, got {self.generation.max_retries}")

        if self.generation.timeout_seconds <= 0:
            raise InvalidConfigError(f"timeout_seconds must be positive, got {self.generation.timeout_seconds}")

        if self.generation.max_parallel_generations < 1:
            raise InvalidConfigError(
                f"max_parallel_generations must be at least 1, got {self.generation.max_parallel_generations}"
            )

        if self.ai.temperature < 0 or self.ai.temperature > 2:
            raise InvalidConfigError(f"AI temperature must be between 0 and 2, got {self.ai.temperature}")

        if self.ai.max_tokens < 50:
            raise InvalidConfigError(f"AI max_tokens must be at least 50, got {self.ai.max_tokens}")


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get singleton configuration instance"""
    config = Config()
    config.validate()
    return config


def get_registry_config() -> RegistryConfig:
    """Get registry configuration"""
    return get_config().registry


def get_generation_config() -> GenerationConfig:
    """Get generation configuration"""
    return get_config().generation


def get_ai_config() -> AIConfig:
    """Get AI configuration"""
    return get_config().ai
