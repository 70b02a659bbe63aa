"""
Routing of gesture output to a controller.

ActionRouter turns confirmed discrete gestures into commands via the
configured mappings. ContinuousActionDispatcher forwards the continuous
event stream as pointer actions and keeps the button state consistent.
"""
import logging
from typing import List, Optional

from .config import GestureMapping
from .types import (
    GESTURE_LABELS,
    ContinuousEvent,
    ControllerProto,
    CursorsMove,
    GestureType,
    ModeEnter,
    ModeExit,
    MouseDown,
    MouseUp,
    Zoom,
)

logger = logging.getLogger(__name__)


class ActionRouter:
    """Executes the command mapped to a confirmed gesture."""

    def __init__(self, controller: ControllerProto, mappings: Optional[List[GestureMapping]] = None):
        self.controller = controller
        self.mappings: List[GestureMapping] = list(mappings or [])

    def set_mappings(self, mappings: List[GestureMapping]) -> None:
        self.mappings = list(mappings)

    def command_for(self, gesture: GestureType) -> Optional[str]:
        """Return the enabled, non-empty command bound to gesture, if any."""
        for mapping in self.mappings:
            if mapping.gesture == gesture and mapping.enabled and mapping.command_id:
                return mapping.command_id
        return None

    async def execute(self, gesture: GestureType) -> bool:
        """
        Run the command mapped to gesture.

        Returns:
            True if a command was found and the controller ran it
        """
        command_id = self.command_for(gesture)
        if command_id is None:
            logger.debug(f"No command mapped for {gesture.value}")
            return False

        success = await self.controller.run_command(command_id)
        label = GESTURE_LABELS[gesture]
        if success:
            logger.info(f"{label} -> {command_id}")
        else:
            logger.warning(f"Command failed or not found: {command_id} ({label})")
        return bool(success)


class ContinuousActionDispatcher:
    """Forwards continuous events to a controller's pointer actions."""

    def __init__(self, controller: ControllerProto):
        self.controller = controller
        self.active = False
        self.mouse_is_down = False
        self.last_position = (0.0, 0.0)

    async def dispatch(self, event: ContinuousEvent) -> None:
        if isinstance(event, ModeEnter):
            await self._activate()
        elif isinstance(event, ModeExit):
            await self.deactivate()
        elif isinstance(event, CursorsMove):
            self.last_position = (event.x, event.y)
            await self.controller.move_cursors(event.x, event.y, event.x2, event.y2)
        elif isinstance(event, Zoom):
            await self.controller.zoom(event.x, event.y, event.delta)
        elif isinstance(event, MouseDown):
            if not self.mouse_is_down:
                self.mouse_is_down = True
                await self.controller.mouse_down(event.x, event.y)
        elif isinstance(event, MouseUp):
            if self.mouse_is_down:
                self.mouse_is_down = False
                await self.controller.mouse_up(event.x, event.y)

    async def dispatch_all(self, events: List[ContinuousEvent]) -> None:
        for event in events:
            await self.dispatch(event)

    async def _activate(self) -> None:
        if self.active:
            return
        self.active = True
        await self.controller.set_active(True)

    async def deactivate(self) -> None:
        """Hide indicators, releasing a held button first."""
        if not self.active:
            return
        if self.mouse_is_down:
            self.mouse_is_down = False
            await self.controller.mouse_up(*self.last_position)
        self.active = False
        await self.controller.set_active(False)
