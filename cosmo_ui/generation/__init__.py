from cosmo_ui.generation.ai_generator import AttemptRecord, ComponentGenerator, GenerationResult
from cosmo_ui.generation.clients import AnthropicGenerator, OpenAIGenerator, get_generator
from cosmo_ui.generation.corrector import ComponentCorrector, format_validation_errors, validate_component
from cosmo_ui.generation.json_repair import extract_json_object
from cosmo_ui.generation.prompts import (
    build_correction_prompt,
    build_generation_prompt,
    build_parse_failure_prompt,
    get_system_prompt,
)

__all__ = [
    "AnthropicGenerator",
    "AttemptRecord",
    "ComponentCorrector",
    "ComponentGenerator",
    "GenerationResult",
    "OpenAIGenerator",
    "build_correction_prompt",
    "build_generation_prompt",
    "build_parse_failure_prompt",
    "extract_json_object",
    "format_validation_errors",
    "get_generator",
    "get_system_prompt",
    "validate_component",
]
