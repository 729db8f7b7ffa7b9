"""
AI generation loop for Cosmo UI components.

Each attempt is a pure transform: prompt -> raw text -> extracted JSON ->
CorrectionResult. A failed attempt feeds its correction prompt (or a
parse-failure prompt) into the next one until the retry budget runs out.
"""

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from cosmo_ui.config import get_generation_config
from cosmo_ui.exceptions import (
    AIGenerationError,
    AIInvalidResponseError,
    AITimeoutError,
    get_retry_delay,
    is_retryable,
)
from cosmo_ui.generation.corrector import ComponentCorrector
from cosmo_ui.generation.json_repair import extract_json_object
from cosmo_ui.generation.prompts import (
    build_generation_prompt,
    build_parse_failure_prompt,
    get_system_prompt,
)
from cosmo_ui.models.validation import ComponentInstance, CorrectionResult
from cosmo_ui.setup_logging import get_logger

logger = get_logger(__name__)

GenerateFn = Callable[[str, str], Union[str, Awaitable[str]]]

# Attempt outcomes
VALID = "valid"
INVALID = "invalid"
PARSE_ERROR = "parse_error"
PROVIDER_ERROR = "provider_error"


@dataclass
class AttemptRecord:
    """What happened on one call to the generator."""
    attempt: int
    outcome: str
    prompt: str
    raw_response: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'attempt': self.attempt,
            'outcome': self.outcome,
            'errors': list(self.errors),
            'elapsedSeconds': round(self.elapsed_seconds, 3),
        }


@dataclass
class GenerationResult:
    """Final outcome of a generation loop.

    When ``success`` is False the instance is the last sanitized fallback:
    renderable, but never verified.
    """
    success: bool
    instance: Optional[ComponentInstance]
    validation: Optional[CorrectionResult]
    raw_response: Optional[str]
    retries: int
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def verified(self) -> bool:
        return self.success


def _is_async_callable(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


class ComponentGenerator:
    """Drives an LLM callable until it yields a valid component or the budget runs out."""

    def __init__(
        self,
        family: Any,
        generate: GenerateFn,
        max_retries: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        max_parallel: Optional[int] = None,
    ):
        config = get_generation_config()
        self.corrector = ComponentCorrector(family)
        self.family = self.corrector.family
        self._generate = generate
        self.max_retries = config.max_retries if max_retries is None else max_retries
        self.timeout_seconds = config.timeout_seconds if timeout_seconds is None else timeout_seconds
        self.max_parallel = config.max_parallel_generations if max_parallel is None else max_parallel
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    async def _call(self, system_prompt: str, user_prompt: str) -> Any:
        if _is_async_callable(self._generate):
            result = await self._generate(system_prompt, user_prompt)
        else:
            # Run the blocking client in the default thread pool so timers keep firing
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, partial(self._generate, system_prompt, user_prompt))
        # Plain callables may still hand back an awaitable (lambda s, u: client.acall(s, u))
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _invoke(self, system_prompt: str, user_prompt: str) -> str:
        """One bounded call to the generator; every failure surfaces as AIGenerationError."""
        try:
            raw = await asyncio.wait_for(self._call(system_prompt, user_prompt), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise AITimeoutError(
                f"{self.family.value} generation timed out after {self.timeout_seconds}s",
                cause=e,
            ) from e
        except AIGenerationError:
            raise
        except Exception as e:
            raise AIGenerationError(f"{self.family.value} generation failed", cause=e) from e

        if not isinstance(raw, str):
            raise AIInvalidResponseError(
                f"{self.family.value} generator returned {type(raw).__name__}, expected str",
                context={'family': self.family.value},
            )
        return raw

    async def generate_from_intent(
        self,
        intent: str,
        constraints: Optional[Mapping[str, Any]] = None,
    ) -> GenerationResult:
        """Generate one component for ``intent``.

        Raises:
            AIGenerationError: when no attempt produced a candidate at all.
        """
        system_prompt = get_system_prompt(self.family)
        prompt = build_generation_prompt(self.family, intent, constraints)
        total_attempts = 1 + self.max_retries

        attempts: List[AttemptRecord] = []
        last_result: Optional[CorrectionResult] = None
        last_error: Optional[AIGenerationError] = None
        raw: Optional[str] = None

        for attempt in range(total_attempts):
            is_last = attempt == total_attempts - 1
            logger.info(f"Generating {self.family.value} (attempt {attempt + 1}/{total_attempts})")
            started = time.monotonic()

            try:
                raw = await self._invoke(system_prompt, prompt)
            except AIGenerationError as e:
                last_error = e
                attempts.append(AttemptRecord(
                    attempt=attempt + 1,
                    outcome=PROVIDER_ERROR,
                    prompt=prompt,
                    errors=[str(e)],
                    elapsed_seconds=time.monotonic() - started,
                ))
                logger.warning(f"Attempt {attempt + 1} failed: {e}")
                if not is_last and is_retryable(e):
                    delay = get_retry_delay(e, attempt)
                    if delay > 0:
                        logger.info(f"Waiting {delay:.1f}s before retry...")
                        await asyncio.sleep(delay)
                continue

            try:
                candidate = extract_json_object(raw)
            except AIInvalidResponseError as e:
                last_error = e
                attempts.append(AttemptRecord(
                    attempt=attempt + 1,
                    outcome=PARSE_ERROR,
                    prompt=prompt,
                    raw_response=raw,
                    errors=[str(e)],
                    elapsed_seconds=time.monotonic() - started,
                ))
                logger.warning(f"Attempt {attempt + 1} returned no usable JSON object")
                prompt = build_parse_failure_prompt(self.family, raw)
                continue

            result = self.corrector.validate_and_correct(candidate)
            last_result = result
            attempts.append(AttemptRecord(
                attempt=attempt + 1,
                outcome=VALID if result.is_valid else INVALID,
                prompt=prompt,
                raw_response=raw,
                errors=[str(e) for e in result.errors],
                elapsed_seconds=time.monotonic() - started,
            ))

            if result.is_valid:
                logger.info(f"✅ {self.family.value} {result.instance.id} generated in {attempt + 1} attempt(s)")
                return GenerationResult(
                    success=True,
                    instance=result.instance,
                    validation=result,
                    raw_response=raw,
                    retries=attempt,
                    attempts=attempts,
                )

            logger.info(f"{self.family.value} attempt {attempt + 1} invalid: {len(result.errors)} error(s)")
            prompt = result.correction_prompt

        if last_result is not None:
            logger.warning(
                f"{self.family.value} retries exhausted after {total_attempts} attempts; "
                f"falling back to unverified sanitized instance"
            )
            return GenerationResult(
                success=False,
                instance=last_result.sanitized,
                validation=last_result,
                raw_response=raw,
                retries=total_attempts - 1,
                attempts=attempts,
            )

        logger.error(f"{self.family.value} generation failed on every attempt")
        raise last_error

    async def generate_batch(
        self,
        intents: Sequence[str],
        constraints: Optional[Mapping[str, Any]] = None,
        return_exceptions: bool = False,
    ) -> List[Union[GenerationResult, BaseException]]:
        """Generate several components concurrently; results follow input order."""
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def _bounded(intent: str) -> GenerationResult:
            async with semaphore:
                return await self.generate_from_intent(intent, constraints)

        return await asyncio.gather(
            *[_bounded(intent) for intent in intents],
            return_exceptions=return_exceptions,
        )
