"""
Test cases for the continuous pointing / zoom / click state machine.
"""
import unittest
import sys
from pathlib import Path

# Add project root and this directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from gesture_control.continuous import (
    DRAG_RELEASE_DEBOUNCE,
    DRAG_THRESHOLD,
    THUMB_DEBOUNCE,
    ContinuousGestureProcessor,
    zone_map,
)
from gesture_control.types import (
    ContinuousMode,
    CursorsMove,
    Landmark,
    ModeEnter,
    ModeExit,
    MouseDown,
    MouseUp,
    PointingHand,
    Zoom,
)
from synthetic_hands import pointing

WIDTH, HEIGHT = 1000, 800


class ContinuousTestCase(unittest.TestCase):

    def setUp(self):
        self.processor = ContinuousGestureProcessor(smoothing_alpha=0.15, zoom_sensitivity=15)
        self.processor.set_viewport(WIDTH, HEIGHT)
        self.events = []
        self.processor.set_callback(self.events.append)

    def step(self, *hands):
        """Run one frame and return (consumed, events emitted during it)."""
        self.events.clear()
        consumed = self.processor.update(list(hands))
        return consumed, list(self.events)

    def enter_cursor_mode(self):
        self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.step(pointing(0.5, 0.5))
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)

    def thumb_frames(self, extended, frames):
        collected = []
        for _ in range(frames):
            collected += self.step(pointing(0.5, 0.5, thumb=extended))[1]
        return collected

    @staticmethod
    def of_type(events, cls):
        return [e for e in events if isinstance(e, cls)]


class TestZoneMap(unittest.TestCase):
    """Test the dead-zone remap."""

    def test_remap_and_clip(self):
        self.assertEqual(zone_map(0.12), 0.0)
        self.assertEqual(zone_map(0.88), 1.0)
        self.assertAlmostEqual(zone_map(0.5), 0.5)
        self.assertEqual(zone_map(-3.0), 0.0)
        self.assertEqual(zone_map(9.0), 1.0)


class TestEntryAndExit(ContinuousTestCase):
    """Test mode entry, continuation and exit."""

    def test_two_hands_enter_zoom(self):
        """Two pointing hands from inactive enter zooming; ModeEnter comes first."""
        consumed, events = self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.assertTrue(consumed)
        self.assertEqual(self.processor.mode, ContinuousMode.ZOOMING)
        self.assertIsInstance(events[0], ModeEnter)
        self.assertIsInstance(events[1], CursorsMove)
        self.assertEqual(len(events), 2)  # no zoom on the first frame

    def test_cursor_positions_scaled_and_mirrored(self):
        """Index tips are mirrored in x, dead-zone mapped and scaled to the viewport."""
        _, events = self.step(pointing(0.5, 0.5), pointing(0.12, 0.88))
        move = events[1]
        self.assertAlmostEqual(move.x, 500.0)
        self.assertAlmostEqual(move.y, 400.0)
        self.assertAlmostEqual(move.x2, 1000.0)  # x mirrored: raw 0.12 -> right edge
        self.assertAlmostEqual(move.y2, 800.0)
        self.assertTrue(move.has_secondary)

    def test_single_hand_cannot_enter(self):
        """One pointing hand from inactive is declined without events."""
        consumed, events = self.step(pointing(0.5, 0.5))
        self.assertFalse(consumed)
        self.assertEqual(events, [])
        self.assertEqual(self.processor.mode, ContinuousMode.INACTIVE)

    def test_no_hands_while_inactive(self):
        """Zero hands while inactive is a silent decline."""
        consumed, events = self.step()
        self.assertFalse(consumed)
        self.assertEqual(events, [])

    def test_one_hand_continues_in_cursor_mode(self):
        """Withdrawing one hand keeps the session alive as a single cursor."""
        self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        consumed, events = self.step(pointing(0.5, 0.5))
        self.assertTrue(consumed)
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], CursorsMove)
        self.assertFalse(events[0].has_secondary)
        self.assertIsNone(events[0].x2)

    def test_exit_on_no_hands(self):
        """Losing all pointing hands emits ModeExit and returns to inactive."""
        self.enter_cursor_mode()
        consumed, events = self.step()
        self.assertFalse(consumed)
        self.assertEqual(events, [ModeExit()])
        self.assertEqual(self.processor.mode, ContinuousMode.INACTIVE)
        self.assertFalse(self.processor.has_initial)

    def test_reentry_needs_two_hands_again(self):
        """After exit a lone pointing hand is not enough to come back."""
        self.enter_cursor_mode()
        self.step()
        consumed, _ = self.step(pointing(0.5, 0.5))
        self.assertFalse(consumed)

    def test_disabled_exits_and_declines(self):
        """Disabling the pipeline exits an active session and declines frames."""
        self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.processor.enabled = False
        consumed, events = self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.assertFalse(consumed)
        self.assertEqual(events, [ModeExit()])
        consumed, events = self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.assertFalse(consumed)
        self.assertEqual(events, [])

    def test_malformed_hands_ignored(self):
        """Pointing hands without 21 landmarks do not count."""
        broken = PointingHand(landmarks=[Landmark(0.5, 0.5)] * 5, fingers=(False, True, False, False, False))
        consumed, events = self.step(pointing(0.5, 0.5), broken)
        self.assertFalse(consumed)
        self.assertEqual(events, [])

    def test_extreme_coordinates(self):
        """Out-of-range coordinates are clipped, never raise."""
        _, events = self.step(pointing(-5.0, 7.0), pointing(42.0, -1.0))
        move = events[1]
        self.assertEqual((move.x, move.y), (1000.0, 800.0))
        self.assertEqual((move.x2, move.y2), (0.0, 0.0))


class TestZoom(ContinuousTestCase):
    """Test the two-hand zoom phase."""

    def test_zoom_delta(self):
        """Index-tip distance 0.30 -> 0.35 gives delta -0.05 * 15 = -0.75 at the cursor midpoint."""
        self.step(pointing(0.30, 0.5), pointing(0.60, 0.5))
        _, events = self.step(pointing(0.275, 0.5), pointing(0.625, 0.5))
        self.assertEqual(len(events), 2)
        move, zoom = events
        self.assertIsInstance(zoom, Zoom)
        self.assertAlmostEqual(zoom.delta, -0.75)
        self.assertAlmostEqual(zoom.x, (move.x + move.x2) / 2)
        self.assertAlmostEqual(zoom.y, (move.y + move.y2) / 2)

    def test_zoom_in_positive(self):
        """Hands moving together zoom in (positive delta)."""
        self.step(pointing(0.30, 0.5), pointing(0.60, 0.5))
        _, events = self.step(pointing(0.35, 0.5), pointing(0.55, 0.5))
        zoom = self.of_type(events, Zoom)[0]
        self.assertAlmostEqual(zoom.delta, 1.5)

    def test_small_distance_change_ignored(self):
        """Changes within the dead band emit no zoom."""
        self.step(pointing(0.30, 0.5), pointing(0.60, 0.5))
        _, events = self.step(pointing(0.30, 0.5), pointing(0.601, 0.5))
        self.assertEqual(self.of_type(events, Zoom), [])

    def test_zoom_sensitivity(self):
        """Delta scales with the configured sensitivity."""
        self.processor.zoom_sensitivity = 30
        self.step(pointing(0.30, 0.5), pointing(0.60, 0.5))
        _, events = self.step(pointing(0.275, 0.5), pointing(0.625, 0.5))
        self.assertAlmostEqual(self.of_type(events, Zoom)[0].delta, -1.5)

    def test_return_from_cursor_starts_new_baseline(self):
        """The first frame back in zoom after cursor mode emits no zoom and re-seeds the second cursor."""
        self.step(pointing(0.45, 0.5), pointing(0.55, 0.5))
        self.step(pointing(0.45, 0.5))
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)

        _, events = self.step(pointing(0.2, 0.5), pointing(0.8, 0.5))
        self.assertEqual(self.of_type(events, Zoom), [])
        move = self.of_type(events, CursorsMove)[0]
        self.assertAlmostEqual(move.x2, zone_map(1 - 0.8) * WIDTH)

        _, events = self.step(pointing(0.15, 0.5), pointing(0.85, 0.5))
        self.assertAlmostEqual(self.of_type(events, Zoom)[0].delta, -1.5)

    def test_ema_smoothing(self):
        """Positions after the first frame follow the EMA with alpha."""
        self.step(pointing(0.5, 0.5), pointing(0.5, 0.5))
        _, events = self.step(pointing(0.12, 0.5), pointing(0.5, 0.5))
        # raw x for 0.12 maps to 1.0; smoothed = 0.15 * 1.0 + 0.85 * 0.5
        self.assertAlmostEqual(events[0].x, (0.15 * 1.0 + 0.85 * 0.5) * WIDTH)
        self.assertAlmostEqual(events[0].x2, 500.0)


class TestCursorPhase(ContinuousTestCase):
    """Test single-hand cursor and the click/drag protocol."""

    def test_zoom_to_cursor_keeps_position(self):
        """The primary cursor continues from its smoothed position, it does not snap."""
        self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        _, events = self.step(pointing(0.12, 0.5))
        self.assertAlmostEqual(events[0].x, (0.15 * 1.0 + 0.85 * 0.5) * WIDTH)

    def test_click(self):
        """A short thumb tap emits MouseDown then MouseUp without entering clicking."""
        self.enter_cursor_mode()
        events = self.thumb_frames(True, DRAG_THRESHOLD - 1)
        self.assertEqual(self.of_type(events, MouseDown), [])
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)

        events = self.thumb_frames(False, THUMB_DEBOUNCE - 1)
        self.assertEqual(self.of_type(events, MouseDown), [])

        _, events = self.step(pointing(0.5, 0.5))
        self.assertEqual([type(e) for e in events], [CursorsMove, MouseDown, MouseUp])
        move, down, up = events
        self.assertAlmostEqual(move.x, 500.0)
        self.assertAlmostEqual(move.y, 400.0)
        self.assertEqual((down.x, down.y), (move.x, move.y))
        self.assertEqual((up.x, up.y), (move.x, move.y))
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)

    def test_single_thumb_frame_is_debounced(self):
        """A one-frame thumb flicker does nothing."""
        self.enter_cursor_mode()
        events = self.thumb_frames(True, 1) + self.thumb_frames(False, 5)
        self.assertEqual(self.of_type(events, MouseDown), [])
        self.assertEqual(self.of_type(events, MouseUp), [])

    def test_drag_starts_after_threshold(self):
        """Holding the thumb escalates to a single MouseDown and clicking mode."""
        self.enter_cursor_mode()
        # Confirmation takes THUMB_DEBOUNCE frames, the hold counts from there
        frames_to_drag = THUMB_DEBOUNCE + DRAG_THRESHOLD - 1
        events = self.thumb_frames(True, frames_to_drag - 1)
        self.assertEqual(self.of_type(events, MouseDown), [])

        events = self.thumb_frames(True, 1)
        self.assertEqual(len(self.of_type(events, MouseDown)), 1)
        self.assertEqual(self.processor.mode, ContinuousMode.CLICKING)

        events = self.thumb_frames(True, 20)
        self.assertEqual(self.of_type(events, MouseDown), [])

    def test_drag_release_debounce(self):
        """Releasing a drag needs the longer debounce, then returns to cursor."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        events = self.thumb_frames(False, DRAG_RELEASE_DEBOUNCE - 1)
        self.assertEqual(self.of_type(events, MouseUp), [])
        self.assertEqual(self.processor.mode, ContinuousMode.CLICKING)

        events = self.thumb_frames(False, 1)
        self.assertEqual(len(self.of_type(events, MouseUp)), 1)
        self.assertEqual(self.of_type(events, MouseDown), [])
        self.assertEqual(self.processor.mode, ContinuousMode.CURSOR)

    def test_drag_brief_retract_keeps_drag(self):
        """A short retraction during a drag does not release it."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        events = self.thumb_frames(False, 3) + self.thumb_frames(True, 3)
        self.assertEqual(self.of_type(events, MouseUp), [])
        self.assertEqual(self.processor.mode, ContinuousMode.CLICKING)

    def test_exit_while_dragging_releases_first(self):
        """Exiting mid-drag emits exactly one MouseUp before ModeExit."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        consumed, events = self.step()
        self.assertFalse(consumed)
        self.assertEqual(len(events), 2)
        self.assertIsInstance(events[0], MouseUp)
        self.assertIsInstance(events[1], ModeExit)
        self.assertEqual(self.processor.mode, ContinuousMode.INACTIVE)

    def test_second_hand_cancels_drag(self):
        """A drag does not carry into zoom: MouseUp, then zooming without ModeEnter."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        consumed, events = self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        self.assertTrue(consumed)
        self.assertIsInstance(events[0], MouseUp)
        self.assertEqual(self.of_type(events, ModeEnter), [])
        self.assertEqual(self.processor.mode, ContinuousMode.ZOOMING)
        self.assertFalse(self.processor.thumb_down)

    def test_pending_click_dropped_across_zoom(self):
        """A confirmed thumb does not survive a zoom -> cursor transition."""
        self.enter_cursor_mode()
        self.thumb_frames(True, THUMB_DEBOUNCE)
        self.assertTrue(self.processor.thumb_confirmed)
        self.step(pointing(0.5, 0.5), pointing(0.3, 0.5))
        events = self.thumb_frames(False, 5)
        self.assertEqual(self.of_type(events, MouseDown), [])
        self.assertEqual(self.of_type(events, MouseUp), [])


class TestReset(ContinuousTestCase):
    """Test explicit reset."""

    def test_reset_releases_and_exits(self):
        """reset() while dragging emits MouseUp then ModeExit."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        self.events.clear()
        self.processor.reset()
        self.assertEqual([type(e) for e in self.events], [MouseUp, ModeExit])
        self.assertEqual(self.processor.mode, ContinuousMode.INACTIVE)

    def test_reset_idempotent(self):
        """A second reset emits nothing."""
        self.enter_cursor_mode()
        self.processor.reset()
        self.events.clear()
        self.processor.reset()
        self.assertEqual(self.events, [])

    def test_reset_while_inactive(self):
        """Resetting an idle processor emits nothing."""
        self.processor.reset()
        self.assertEqual(self.events, [])

    def test_state_persists_until_reset(self):
        """Without reset a drag survives frames with the same single hand."""
        self.enter_cursor_mode()
        self.thumb_frames(True, 15)
        self.assertTrue(self.processor.thumb_down)
        self.processor.reset()
        self.assertFalse(self.processor.thumb_down)
        self.assertFalse(self.processor.has_initial)


if __name__ == '__main__':
    unittest.main()
