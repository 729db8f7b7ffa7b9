"""
Exception hierarchy for the Cosmo UI engine.

Bad component data never raises: validators, sanitizers, correctors and
registries report problems through their return values. These exceptions
cover the provider calls of the generation loop, configuration and
programmer errors.
"""

import random
from typing import Optional, Dict, Any


class CosmoError(Exception):
    """Base exception for all engine errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === AI-related exceptions ===

class AIGenerationError(CosmoError):
    """AI model failed to generate content"""
    pass


class AITimeoutError(AIGenerationError):
    """AI generation timed out"""
    pass


class AIRateLimitError(AIGenerationError):
    """AI API rate limit exceeded"""
    pass


class AIOverloadedError(AIGenerationError):
    """AI service is overloaded (HTTP 529)"""
    pass


class AIInvalidResponseError(AIGenerationError):
    """AI returned a response with no extractable JSON object"""

    def __init__(self, message: str, raw_text: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_text = raw_text


# === Configuration exceptions ===

class ConfigurationError(CosmoError):
    """Configuration error"""
    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""
    pass


# === Registry exceptions ===

class RegistryError(CosmoError):
    """Registry misuse"""
    pass


class UnknownFamilyError(RegistryError):
    """No validator or manager is registered for the component family"""

    def __init__(self, family: Any, **kwargs):
        super().__init__(f"Unknown component family: {family!r}", **kwargs)
        self.family = family


# === Recovery helpers ===

def is_retryable(error: Exception) -> bool:
    """Check if a provider error is worth waiting out before the next attempt"""
    retryable_types = (
        AITimeoutError,
        AIRateLimitError,
        AIOverloadedError,
    )
    return isinstance(error, retryable_types)


def get_retry_delay(error: Exception, attempt: int) -> float:
    """Get retry delay for error"""
    if isinstance(error, AIOverloadedError):
        # Exponential backoff with jitter to prevent thundering herd
        base_delay = 10.0
        max_delay = 120.0
        delay = min(max_delay, base_delay * (2 ** attempt))
        jitter = random.uniform(0, delay * 0.2)
        return delay + jitter
    elif isinstance(error, AIRateLimitError):
        return min(60.0, 10.0 * (2 ** attempt))
    elif isinstance(error, AITimeoutError):
        return min(30.0, 2.0 * (2 ** attempt))
    else:
        return 0.0
