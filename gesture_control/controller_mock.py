"""
Mock controller implementation for testing gesture commands.
"""
import logging
from typing import List, Optional, Set

logger = logging.getLogger(__name__)


class MockController:
    """Mock controller that logs actions instead of executing them."""

    def __init__(self, known_commands: Optional[Set[str]] = None):
        """
        Initialize the mock controller.

        Args:
            known_commands: If given, run_command fails for ids outside this set
        """
        self.known_commands = known_commands
        self.commands: List[str] = []
        self.pointer_log: List[tuple] = []
        self.active = False

    async def run_command(self, command_id: str) -> bool:
        """Record a command instead of executing it."""
        if self.known_commands is not None and command_id not in self.known_commands:
            logger.info(f"[MockController] Unknown command: {command_id}")
            return False
        self.commands.append(command_id)
        logger.info(f"[MockController] Command: {command_id} (call #{len(self.commands)})")
        return True

    async def move_cursors(self, x: float, y: float,
                           x2: Optional[float] = None, y2: Optional[float] = None) -> None:
        self.pointer_log.append(("move", x, y, x2, y2))
        logger.debug(f"[MockController] Cursors: ({x:.0f}, {y:.0f}) second={x2 is not None}")

    async def zoom(self, x: float, y: float, delta: float) -> None:
        self.pointer_log.append(("zoom", x, y, delta))
        logger.info(f"[MockController] Zoom: delta={delta:.3f} at ({x:.0f}, {y:.0f})")

    async def mouse_down(self, x: float, y: float) -> None:
        self.pointer_log.append(("down", x, y))
        logger.info(f"[MockController] Mouse down at ({x:.0f}, {y:.0f})")

    async def mouse_up(self, x: float, y: float) -> None:
        self.pointer_log.append(("up", x, y))
        logger.info(f"[MockController] Mouse up at ({x:.0f}, {y:.0f})")

    async def set_active(self, active: bool) -> None:
        self.active = active
        logger.info(f"[MockController] Pointer mode {'on' if active else 'off'}")

    def reset_counters(self) -> None:
        """Reset recorded actions for testing."""
        self.commands.clear()
        self.pointer_log.clear()
