"""
Settle-delays between dependent UI steps.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

from .base import EditorOperations, UISurface
from ...config.models import DispatchConfig
from ...utils.logging import get_logger


SleepFunction = Callable[[float], Awaitable[None]]


class SettlePhase(Enum):
    """Which gap is being waited out."""

    AFTER_OPEN = "after_open"          # widget opened, about to type
    AFTER_TYPE = "after_type"          # text typed, about to accept
    AFTER_NAVIGATE = "after_navigate"  # file opened, about to move the caret


class Settler:
    """
    Waits between an action on a UI surface and the next dependent action.

    When the editor reports readiness for the surface, that event replaces the
    fixed delay and only minimum_gap_seconds is slept afterwards. Otherwise
    the configured delay for the phase is slept.
    """

    def __init__(self, config: Optional[DispatchConfig] = None, sleep: Optional[SleepFunction] = None):
        self.config = config or DispatchConfig()
        self._sleep = sleep or asyncio.sleep
        self.logger = get_logger(__name__)

    def delay_for(self, phase: SettlePhase) -> float:
        return {
            SettlePhase.AFTER_OPEN: self.config.open_settle_seconds,
            SettlePhase.AFTER_TYPE: self.config.type_settle_seconds,
            SettlePhase.AFTER_NAVIGATE: self.config.navigate_settle_seconds,
        }[phase]

    async def settle(self, editor: EditorOperations, surface: UISurface, phase: SettlePhase) -> None:
        if self.config.use_readiness_signal and await self._await_readiness(editor, surface):
            await self._sleep(self.config.minimum_gap_seconds)
            return

        delay = self.delay_for(phase)
        self.logger.debug(f"Settling {delay:.3f}s {phase.value} on {surface.value}")
        await self._sleep(delay)

    async def _await_readiness(self, editor: EditorOperations, surface: UISurface) -> bool:
        try:
            return bool(await asyncio.wait_for(
                editor.wait_until_ready(surface),
                timeout=self.config.readiness_timeout_seconds,
            ))
        except asyncio.TimeoutError:
            self.logger.warning(
                f"No readiness signal for {surface.value} within "
                f"{self.config.readiness_timeout_seconds}s, using fixed delay"
            )
            return False
