"""Unit tests for the generation retry loop."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

import pytest

from cosmo_ui.exceptions import AIGenerationError, AIInvalidResponseError, AIRateLimitError, AITimeoutError
from cosmo_ui.generation import ComponentCorrector, ComponentGenerator
from cosmo_ui.generation import ai_generator
from cosmo_ui.models import ValidationResult
from cosmo_ui.validation import HUDCardValidator


class StrictTitleValidator(HUDCardValidator):
    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        super()._validate_fields(data, result)
        if data.get("title") == "Untitled":
            result.error("title", "title is required")


def _strict_card_generator(generate: Any, **kwargs: Any) -> ComponentGenerator:
    generator = ComponentGenerator("HUDCard", generate, **kwargs)
    generator.corrector = ComponentCorrector("HUDCard", validator=StrictTitleValidator())
    return generator


class TestGenerateFromIntent:
    async def test_first_attempt_valid(self, scripted, fenced, hud_card_data: Dict[str, Any]) -> None:
        generate = scripted(fenced(hud_card_data))
        result = await ComponentGenerator("HUDCard", generate).generate_from_intent("new messages")

        assert result.success
        assert result.verified
        assert result.retries == 0
        assert result.instance.id == "card-welcome"
        assert [a.outcome for a in result.attempts] == ["valid"]
        system_prompt, user_prompt = generate.calls[0]
        assert "HUDCard" in system_prompt
        assert user_prompt.startswith('Generate a HUDCard for: "new messages"')

    async def test_async_generator(self, scripted, progress_ring_data: Dict[str, Any]) -> None:
        generate = scripted(progress_ring_data, is_async=True)
        result = await ComponentGenerator("ProgressRing", generate).generate_from_intent("upload")
        assert result.success
        assert result.instance.value == 42

    async def test_constraints_reach_the_prompt(self, scripted, status_indicator_data: Dict[str, Any]) -> None:
        generate = scripted(status_indicator_data)
        await ComponentGenerator("StatusIndicator", generate).generate_from_intent("sync", {"state": "loading"})
        assert '- state must be: "loading"' in generate.user_prompts[0]

    async def test_parse_failure_then_success(self, scripted, context_badge_data: Dict[str, Any]) -> None:
        generate = scripted("Sorry, I can't do JSON today.", context_badge_data)
        result = await ComponentGenerator("ContextBadge", generate).generate_from_intent("online")

        assert result.success
        assert result.retries == 1
        assert [a.outcome for a in result.attempts] == ["parse_error", "valid"]
        assert "did not contain a valid ContextBadge JSON object" in generate.user_prompts[1]
        assert "Sorry, I can't do JSON today." in generate.user_prompts[1]

    async def test_correction_prompt_feeds_next_attempt(self, scripted) -> None:
        generate = scripted(
            {"id": "c", "content": "Disk almost full"},
            {"id": "c", "title": "Storage", "content": "Disk almost full"},
        )
        generator = _strict_card_generator(generate)

        result = await generator.generate_from_intent("disk space")

        assert result.success
        assert result.retries == 1
        assert result.instance.title == "Storage"
        assert [a.outcome for a in result.attempts] == ["invalid", "valid"]
        retry_prompt = generate.user_prompts[1]
        assert retry_prompt.startswith("The following HUDCard has validation errors.")
        assert "- title: title is required" in retry_prompt
        assert result.attempts[0].errors == ["title: title is required"]

    async def test_exhausted_retries_fall_back_to_sanitized(self, scripted) -> None:
        generate = scripted({"id": "c", "content": "one"}, {"id": "c", "content": "two"})
        generator = _strict_card_generator(generate, max_retries=1)

        result = await generator.generate_from_intent("anything")

        assert not result.success
        assert not result.verified
        assert result.retries == 1
        assert len(generate.calls) == 2
        assert result.instance is result.validation.sanitized
        assert result.instance.content == "two"
        assert result.instance.title == "Untitled"

    async def test_fallback_uses_last_candidate_even_after_later_parse_failure(self, scripted) -> None:
        generate = scripted({"id": "c", "content": "one"}, "garbage", "more garbage")
        result = await _strict_card_generator(generate).generate_from_intent("anything")

        assert not result.success
        assert result.instance.content == "one"
        assert [a.outcome for a in result.attempts] == ["invalid", "parse_error", "parse_error"]

    async def test_all_parse_failures_raise(self, scripted) -> None:
        generate = scripted("nope", "still nope", "{broken")
        with pytest.raises(AIInvalidResponseError):
            await ComponentGenerator("HUDCard", generate).generate_from_intent("x")
        assert len(generate.calls) == 3

    async def test_all_provider_failures_raise(self, scripted) -> None:
        generate = scripted(RuntimeError("boom"), RuntimeError("boom"))
        with pytest.raises(AIGenerationError) as exc_info:
            await ComponentGenerator("HUDCard", generate, max_retries=1).generate_from_intent("x")
        assert isinstance(exc_info.value.cause, RuntimeError)

    async def test_retryable_error_waits_then_retries(
        self, scripted, monkeypatch, hud_card_data: Dict[str, Any]
    ) -> None:
        delays: List[int] = []

        def fake_delay(error: Exception, attempt: int) -> float:
            delays.append(attempt)
            return 0.001

        monkeypatch.setattr(ai_generator, "get_retry_delay", fake_delay)
        generate = scripted(AIRateLimitError("slow down"), hud_card_data)

        result = await ComponentGenerator("HUDCard", generate).generate_from_intent("x")

        assert result.success
        assert delays == [0]
        assert [a.outcome for a in result.attempts] == ["provider_error", "valid"]

    async def test_timeout(self) -> None:
        async def slow(system_prompt: str, user_prompt: str) -> str:
            await asyncio.sleep(5)
            return "{}"

        generator = ComponentGenerator("HUDCard", slow, max_retries=0, timeout_seconds=0.05)
        with pytest.raises(AITimeoutError):
            await generator.generate_from_intent("x")

    async def test_plain_callable_returning_awaitable(self, hud_card_data: Dict[str, Any]) -> None:
        async def acall(system_prompt: str, user_prompt: str) -> str:
            return json.dumps(hud_card_data)

        generator = ComponentGenerator("HUDCard", lambda s, u: acall(s, u), max_retries=0)
        result = await generator.generate_from_intent("hello")

        assert result.success
        assert result.instance.id == "card-welcome"

    async def test_non_text_response_is_invalid(self, scripted, hud_card_data: Dict[str, Any]) -> None:
        generate = scripted(None, hud_card_data)
        result = await ComponentGenerator("HUDCard", generate).generate_from_intent("x")

        assert result.success
        assert [a.outcome for a in result.attempts] == ["provider_error", "valid"]
        assert "returned NoneType" in result.attempts[0].errors[0]

    async def test_non_text_response_on_last_attempt_raises(self) -> None:
        generator = ComponentGenerator("HUDCard", lambda s, u: 42, max_retries=0)
        with pytest.raises(AIInvalidResponseError):
            await generator.generate_from_intent("x")

    def test_defaults_come_from_config(self, monkeypatch) -> None:
        monkeypatch.setenv("COSMO_MAX_RETRIES", "4")
        monkeypatch.setenv("COSMO_GENERATION_TIMEOUT", "12.5")
        generator = ComponentGenerator("HUDCard", lambda s, u: "{}")
        assert generator.max_retries == 4
        assert generator.timeout_seconds == 12.5

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValueError):
            ComponentGenerator("HUDCard", lambda s, u: "{}", max_retries=-1)


class TestGenerateBatch:
    async def test_order_preserved_and_parallelism_bounded(self) -> None:
        class Tracking:
            def __init__(self) -> None:
                self.active = 0
                self.peak = 0

            async def __call__(self, system_prompt: str, user_prompt: str) -> str:
                self.active += 1
                self.peak = max(self.peak, self.active)
                await asyncio.sleep(0.01)
                self.active -= 1
                intent = user_prompt.split('"')[1]
                return json.dumps({"id": intent, "state": "active"})

        generate = Tracking()
        generator = ComponentGenerator("StatusIndicator", generate, max_parallel=2)
        intents = [f"svc-{i}" for i in range(5)]

        results = await generator.generate_batch(intents)

        assert [r.instance.id for r in results] == intents
        assert generate.peak <= 2

    async def test_return_exceptions(self, scripted) -> None:
        generate = scripted("nope", is_async=True)
        generator = ComponentGenerator("StatusIndicator", generate, max_retries=0)
        results = await generator.generate_batch(["x"], return_exceptions=True)
        assert isinstance(results[0], AIInvalidResponseError)
