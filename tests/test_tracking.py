"""
Test cases for frame assembly and the frame submission loop.
"""
import asyncio
import math
import unittest

from handgallery.config import load_config
from handgallery.tracking import FrameAssembler, FrameLoop
from handgallery.types import DetectedHand
from tests.poses import fist_with_thumb, pinch_pose


class StepClock:
    """Deterministic clock advancing a fixed step on every read."""

    def __init__(self, step: float = 0.05):
        self.t = 0.0
        self.step = step

    def __call__(self) -> float:
        self.t += self.step
        return self.t


class FakeSource:
    """Landmark source replaying canned results; exceptions are raised."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0

    def detect(self, frame):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestFrameAssembler(unittest.TestCase):
    """Test throttling, handedness correction and publishing."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.assembler = FrameAssembler(self.cfg.classifier, self.cfg.tracking)
        self.hand = DetectedHand(landmarks=pinch_pose(0.3, 0.4), label="Left")

    def test_callback_within_throttle_is_dropped(self):
        """Two callbacks 5 ms apart: the second publishes nothing."""
        first = self.assembler.process_results([self.hand], 1.000)
        second = self.assembler.process_results([], 1.005)

        self.assertIsNotNone(first)
        self.assertIsNone(second)
        # Dropped callback leaves the published snapshot untouched
        self.assertIs(self.assembler.snapshot, first)

    def test_callbacks_past_throttle_both_publish(self):
        """Two callbacks 20 ms apart both publish."""
        self.assertIsNotNone(self.assembler.process_results([self.hand], 1.000))
        self.assertIsNotNone(self.assembler.process_results([self.hand], 1.020))

    def test_throttle_measured_from_last_processed(self):
        """A dropped callback does not push the throttle window forward."""
        self.assembler.process_results([], 1.000)
        self.assertIsNone(self.assembler.process_results([], 1.010))
        self.assertIsNotNone(self.assembler.process_results([], 1.017))

    def test_handedness_is_flipped(self):
        """The detector's Left is the user's right hand."""
        snapshot = self.assembler.process_results([self.hand], 1.0)
        self.assertIsNone(snapshot.left_hand)
        self.assertEqual(snapshot.right_hand.handedness, "Right")

        other = DetectedHand(landmarks=fist_with_thumb(0.1), label="Right")
        snapshot = self.assembler.process_results([other], 2.0)
        self.assertEqual(snapshot.left_hand.handedness, "Left")
        self.assertTrue(snapshot.left_hand.is_thumbs_up)
        self.assertIsNone(snapshot.right_hand)

    def test_both_hands(self):
        left = DetectedHand(landmarks=fist_with_thumb(0.1), label="Right")
        snapshot = self.assembler.process_results([self.hand, left], 1.0)
        self.assertIsNotNone(snapshot.left_hand)
        self.assertIsNotNone(snapshot.right_hand)
        self.assertEqual(snapshot.timestamp, 1.0)

    def test_duplicate_label_last_wins(self):
        """Two hands with the same label: the later one is kept."""
        second = DetectedHand(landmarks=pinch_pose(0.7, 0.2), label="Left")
        snapshot = self.assembler.process_results([self.hand, second], 1.0)
        self.assertAlmostEqual(snapshot.right_hand.pinch_position[0], 0.7)
        self.assertIsNone(snapshot.left_hand)

    def test_missing_hand_clears_immediately(self):
        """No stickiness: one missed detection clears the side."""
        self.assertIsNotNone(self.assembler.process_results([self.hand], 1.0).right_hand)
        self.assertIsNone(self.assembler.process_results([], 1.1).right_hand)

    def test_malformed_hand_is_absent(self):
        points = pinch_pose(0.5, 0.5)
        points[8] = (math.nan, 0.5, 0.0)
        snapshot = self.assembler.process_results([DetectedHand(landmarks=points, label="Left")], 1.0)
        self.assertIsNone(snapshot.right_hand)

    def test_readiness_independent_of_hands(self):
        self.assertFalse(self.assembler.process_results([], 1.0).is_ready)
        self.assembler.mark_ready()
        self.assertTrue(self.assembler.snapshot.is_ready)
        self.assertTrue(self.assembler.process_results([], 2.0).is_ready)


class TestFrameLoop(unittest.TestCase):
    """Test the frame submission loop."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.assembler = FrameAssembler(self.cfg.classifier, self.cfg.tracking)
        self.assembler.mark_ready()
        self.hand = DetectedHand(landmarks=pinch_pose(0.3, 0.4), label="Left")

    def _loop(self, frames, source, **kwargs):
        feed = iter(frames)
        return FrameLoop(lambda: next(feed, None), source, self.assembler,
                         clock=StepClock(), **kwargs)

    def test_publishes_each_frame_until_feed_ends(self):
        published = []

        async def on_snapshot(snapshot):
            published.append(snapshot)

        source = FakeSource([[self.hand], [], [self.hand]])
        loop = self._loop([1, 2, 3], source, on_snapshot=on_snapshot)
        asyncio.run(loop.run())

        self.assertEqual(len(published), 3)
        self.assertIsNotNone(published[0].right_hand)
        self.assertIsNone(published[1].right_hand)
        self.assertFalse(loop.running)

    def test_detector_errors_are_skipped(self):
        """A failing detection skips that cycle only; readiness stays."""
        published = []
        cycles = []

        async def on_snapshot(snapshot):
            published.append(snapshot)

        async def on_cycle(t_now):
            cycles.append(t_now)

        source = FakeSource([[self.hand], RuntimeError("model hiccup"), [self.hand]])
        loop = self._loop([1, 2, 3], source, on_snapshot=on_snapshot, on_cycle=on_cycle)
        asyncio.run(loop.run())

        self.assertEqual(source.calls, 3)
        self.assertEqual(loop.error_count, 1)
        self.assertEqual(len(published), 2)
        self.assertEqual(len(cycles), 3)
        self.assertTrue(all(s.is_ready for s in published))

    def test_stop_prevents_further_publishing(self):
        published = []
        source = FakeSource([[self.hand]] * 5)

        async def on_snapshot(snapshot):
            published.append(snapshot)
            loop.stop()

        loop = self._loop(range(5), source, on_snapshot=on_snapshot)
        asyncio.run(loop.run())

        self.assertEqual(len(published), 1)
        self.assertEqual(source.calls, 1)

    def test_single_outstanding_detection(self):
        """An async detector is awaited before the next frame is submitted."""
        in_flight = 0
        max_in_flight = 0

        class SlowSource:
            async def detect(self, frame):
                nonlocal in_flight, max_in_flight
                in_flight += 1
                max_in_flight = max(max_in_flight, in_flight)
                await asyncio.sleep(0)
                in_flight -= 1
                return []

        loop = self._loop(range(4), SlowSource())
        asyncio.run(loop.run())

        self.assertEqual(max_in_flight, 1)


if __name__ == '__main__':
    unittest.main()
