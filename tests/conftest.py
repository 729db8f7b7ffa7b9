"""Shared fixtures: sample components, a manual timer loop and scripted generators."""

from __future__ import annotations

import heapq
import itertools
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest


# ---------------------------------------------------------------------------
# Sample components (raw LLM-shaped JSON, camelCase keys)
# ---------------------------------------------------------------------------


@pytest.fixture
def hud_card_data() -> Dict[str, Any]:
    return {
        "id": "card-welcome",
        "title": "Welcome back",
        "content": "You have 3 new messages waiting.",
        "variant": "info",
        "priority": 2,
        "position": "top-right",
        "icon": "bell",
        "autoHideAfterSeconds": 10,
        "dismissible": True,
        "actions": [
            {"id": "open", "label": "Open inbox", "variant": "primary"},
            {"id": "later", "label": "Later", "variant": "secondary"},
        ],
    }


@pytest.fixture
def context_badge_data() -> Dict[str, Any]:
    return {
        "id": "badge-online",
        "label": "Online",
        "variant": "success",
        "icon": "wifi",
        "position": "top-left",
        "contextualColor": "#22c55e",
        "autoDismissMs": 5000,
        "dismissible": True,
        "pulse": False,
    }


@pytest.fixture
def progress_ring_data() -> Dict[str, Any]:
    return {
        "id": "ring-upload",
        "value": 42,
        "size": 64,
        "thickness": 8,
        "variant": "info",
        "animated": True,
        "showValue": True,
        "label": "Uploading",
        "position": "bottom-right",
    }


@pytest.fixture
def status_indicator_data() -> Dict[str, Any]:
    return {
        "id": "indicator-sync",
        "state": "loading",
        "label": "Syncing",
        "size": 12,
        "glow": False,
        "position": "top-right",
    }


# ---------------------------------------------------------------------------
# Manual event loop stub for deterministic timer tests
# ---------------------------------------------------------------------------


class ManualTimerHandle:
    def __init__(self, when: float, callback: Callable, args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualLoop:
    """Just enough of an event loop for ``call_later``; time moves only on ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualTimerHandle]] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable, *args: Any) -> ManualTimerHandle:
        handle = ManualTimerHandle(self.now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in order. Returns the number fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if handle.cancelled:
                continue
            handle.callback(*handle.args)
            fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> List[ManualTimerHandle]:
        return [h for _, _, h in self._queue if not h.cancelled]


@pytest.fixture
def manual_loop() -> ManualLoop:
    return ManualLoop()


# ---------------------------------------------------------------------------
# Scripted generators
# ---------------------------------------------------------------------------


class ScriptedGenerator:
    """Sync generator callable returning (or raising) scripted responses in order."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self.responses:
            raise AssertionError("generator called more often than scripted")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, dict):
            return json.dumps(response)
        return response

    @property
    def user_prompts(self) -> List[str]:
        return [user for _, user in self.calls]


class AsyncScriptedGenerator(ScriptedGenerator):
    async def __call__(self, system_prompt: str, user_prompt: str) -> str:  # type: ignore[override]
        return ScriptedGenerator.__call__(self, system_prompt, user_prompt)


@pytest.fixture
def scripted() -> Callable[..., ScriptedGenerator]:
    def _make(*responses: Any, is_async: bool = False) -> ScriptedGenerator:
        cls = AsyncScriptedGenerator if is_async else ScriptedGenerator
        return cls(list(responses))

    return _make


@pytest.fixture
def events() -> List[Dict[str, Any]]:
    """A list to collect registry events into (subscribe ``events.append``)."""
    return []


@pytest.fixture(autouse=True)
def _clear_config_cache():
    from cosmo_ui.config import get_config

    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def fenced() -> Callable[..., str]:
    """Wrap a payload the way chatty models do."""

    def _fence(payload: Optional[Dict[str, Any]], prefix: str = "Here you go:\n") -> str:
        return f"{prefix}```json\n{json.dumps(payload, indent=2)}\n```\nLet me know!"

    return _fence
