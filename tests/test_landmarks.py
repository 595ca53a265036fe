"""
Test cases for gesture classification with synthetic hand poses.
"""
import itertools
import math
import unittest

from handgallery.config import load_config
from handgallery.landmarks import (
    calculate_pinch, classify_hand, detect_thumb_gesture, fingers_curled, fingers_extended,
    is_open_palm, sanitize_landmarks,
)
from tests.poses import fist_with_thumb, open_palm, pinch_pose


class TestPinch(unittest.TestCase):
    """Test pinch distance, strength and position."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_touching_tips_is_full_pinch(self):
        """Thumb tip on index tip pinches at full strength."""
        for x, y in [(0.1, 0.2), (0.5, 0.5), (0.9, 0.7)]:
            is_pinching, position, strength = calculate_pinch(pinch_pose(x, y), self.cfg.pinch_threshold)
            self.assertTrue(is_pinching)
            self.assertEqual(strength, 1.0)
            self.assertAlmostEqual(position[0], x)
            self.assertAlmostEqual(position[1], y)

    def test_distance_at_or_over_threshold_is_no_pinch(self):
        """Distances from the threshold upward never pinch and have zero strength."""
        for gap in [0.08, 0.1, 0.3]:
            points = pinch_pose(0.5, 0.5)
            points[4] = (0.0, 0.5, 0.0)
            points[8] = (gap, 0.5, 0.0)
            is_pinching, _, strength = calculate_pinch(points, 0.08)
            self.assertFalse(is_pinching)
            self.assertEqual(strength, 0.0)

    def test_strength_is_linear_inside_threshold(self):
        """Half the threshold distance gives half strength."""
        is_pinching, _, strength = calculate_pinch(pinch_pose(0.5, 0.5, gap=0.04), 0.08)
        self.assertTrue(is_pinching)
        self.assertAlmostEqual(strength, 0.5)

    def test_depth_counts_toward_distance(self):
        """z separation alone can break a pinch."""
        points = pinch_pose(0.5, 0.5)
        points[4] = (0.5, 0.5, 0.0)
        points[8] = (0.5, 0.5, 0.09)
        is_pinching, position, _ = calculate_pinch(points, 0.08)
        self.assertFalse(is_pinching)
        self.assertEqual(position, (0.5, 0.5))


class TestThumbGesture(unittest.TestCase):
    """Test thumbs-up / thumbs-down detection."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_thumbs_up(self):
        """Curled fingers, extended thumb, +0.10 vertical is thumbs up."""
        is_up, is_down = detect_thumb_gesture(fist_with_thumb(0.10), self.cfg)
        self.assertTrue(is_up)
        self.assertFalse(is_down)

    def test_thumbs_down(self):
        """-0.10 vertical is thumbs down."""
        is_up, is_down = detect_thumb_gesture(fist_with_thumb(-0.10), self.cfg)
        self.assertFalse(is_up)
        self.assertTrue(is_down)

    def test_sideways_thumb_is_neither(self):
        """+0.02 vertical is below the threshold."""
        self.assertEqual(detect_thumb_gesture(fist_with_thumb(0.02), self.cfg), (False, False))

    def test_open_fingers_block_thumb_gesture(self):
        """Thumbs up needs the other four fingers curled."""
        points = fist_with_thumb(0.10)
        points[8] = (0.48, 0.40, 0.0)  # index tip above its PIP
        self.assertFalse(fingers_curled(points))
        self.assertEqual(detect_thumb_gesture(points, self.cfg), (False, False))

    def test_folded_thumb_is_not_extended(self):
        """Thumb tip close to the wrist does not count."""
        points = fist_with_thumb(0.10)
        points[0] = (0.40, 0.70, 0.0)  # wrist right under the thumb tip
        points[4] = (0.38, 0.65, 0.0)
        self.assertEqual(detect_thumb_gesture(points, self.cfg), (False, False))

    def test_never_both(self):
        """Up and down are mutually exclusive over a sweep of poses."""
        for vertical, tip_x in itertools.product([-0.3, -0.07, -0.06, 0.0, 0.06, 0.07, 0.3],
                                                 [0.2, 0.38, 0.5]):
            points = fist_with_thumb(vertical)
            points[4] = (tip_x, points[4][1], 0.0)
            is_up, is_down = detect_thumb_gesture(points, self.cfg)
            self.assertFalse(is_up and is_down)


class TestOpenPalm(unittest.TestCase):
    """Test open palm detection."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_open_palm(self):
        points = open_palm()
        self.assertTrue(fingers_extended(points))
        self.assertTrue(is_open_palm(points, self.cfg))

    def test_thumb_tucked_in(self):
        """Thumb tip right above its MCP is not splayed."""
        points = open_palm()
        points[4] = (points[2][0] + 0.01, 0.60, 0.0)
        self.assertFalse(is_open_palm(points, self.cfg))

    def test_fist_is_not_palm(self):
        self.assertFalse(is_open_palm(fist_with_thumb(0.1), self.cfg))


class TestClassifyHand(unittest.TestCase):
    """Test the combined classifier and landmark validation."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config().classifier

    def test_signal_fields(self):
        signal = classify_hand(fist_with_thumb(0.10), "Right", self.cfg)
        self.assertEqual(signal.handedness, "Right")
        self.assertTrue(signal.is_thumbs_up)
        self.assertFalse(signal.is_thumbs_down)
        self.assertFalse(signal.is_pinching)
        self.assertFalse(signal.is_open_palm)
        self.assertEqual(len(signal.landmarks), 21)

    def test_pinch_signal(self):
        signal = classify_hand(pinch_pose(0.3, 0.4), "Left", self.cfg)
        self.assertTrue(signal.is_pinching)
        self.assertEqual(signal.pinch_strength, 1.0)
        self.assertFalse(signal.is_thumbs_up or signal.is_thumbs_down or signal.is_open_palm)

    def test_thresholds_are_configurable(self):
        """A looser pinch threshold turns a near pinch into a pinch."""
        points = pinch_pose(0.5, 0.5, gap=0.1)
        self.assertFalse(classify_hand(points, "Right", self.cfg).is_pinching)
        self.cfg.pinch_threshold = 0.12
        self.assertTrue(classify_hand(points, "Right", self.cfg).is_pinching)

    def test_non_finite_landmarks_rejected(self):
        """NaN or infinite coordinates classify as no hand."""
        for bad in (math.nan, math.inf, -math.inf):
            points = pinch_pose(0.5, 0.5)
            points[4] = (bad, 0.5, 0.0)
            self.assertIsNone(sanitize_landmarks(points))
            self.assertIsNone(classify_hand(points, "Right", self.cfg))

    def test_wrong_landmark_count_rejected(self):
        self.assertIsNone(classify_hand(pinch_pose(0.5, 0.5)[:20], "Right", self.cfg))
        self.assertIsNone(classify_hand([], "Right", self.cfg))
        self.assertIsNone(classify_hand(None, "Right", self.cfg))

    def test_two_dimensional_points_rejected(self):
        self.assertIsNone(sanitize_landmarks([(0.5, 0.5)] * 21))


if __name__ == '__main__':
    unittest.main()
