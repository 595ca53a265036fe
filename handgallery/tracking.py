"""
Frame assembly: turns raw, irregular detector callbacks into throttled
tracking snapshots, and drives detection with a single outstanding request.
"""
import asyncio
import inspect
import logging
import time
from typing import Awaitable, Callable, List, Optional

from .config import ClassifierConfig, TrackingConfig
from .landmarks import classify_hand
from .types import DetectedHand, HandSignal, LandmarkSourceProto, TrackingSnapshot

logger = logging.getLogger(__name__)

# The detector reports handedness as seen by a front-facing camera
_FLIP_LABEL = {"Left": "Right", "Right": "Left"}


class FrameAssembler:
    """
    Publishes a `TrackingSnapshot` per accepted detector callback.

    Callbacks arriving sooner than `publish_throttle_ms` after the last
    processed one are dropped entirely. No smoothing is applied: a hand that is
    missing from a callback is `None` in that snapshot.
    """

    def __init__(self, classifier_cfg: ClassifierConfig, tracking_cfg: TrackingConfig):
        self.classifier_cfg = classifier_cfg
        self.throttle_s = tracking_cfg.publish_throttle_ms / 1000.0
        self.last_process_time: Optional[float] = None
        self.is_ready = False
        self.snapshot = TrackingSnapshot()

    def mark_ready(self) -> None:
        """Record that the detection pipeline is initialized. Never revoked."""
        self.is_ready = True
        self.snapshot = TrackingSnapshot(
            left_hand=self.snapshot.left_hand,
            right_hand=self.snapshot.right_hand,
            is_ready=True,
            timestamp=self.snapshot.timestamp,
        )
        logger.info("✅ Hand tracking ready")

    def process_results(self, hands: List[DetectedHand], t_now: float) -> Optional[TrackingSnapshot]:
        """
        Classify one detector callback and publish it.

        Args:
            hands: Zero to two raw detections, in no particular order
            t_now: Current timestamp in seconds

        Returns:
            The new snapshot, or None if the callback was throttled
        """
        if self.last_process_time is not None and t_now - self.last_process_time < self.throttle_s:
            return None
        self.last_process_time = t_now

        left_hand: Optional[HandSignal] = None
        right_hand: Optional[HandSignal] = None

        for hand in hands:
            handedness = _FLIP_LABEL.get(hand.label)
            if handedness is None:
                logger.debug(f"Ignoring hand with unknown label {hand.label!r}")
                continue

            signal = classify_hand(hand.landmarks, handedness, self.classifier_cfg)
            if signal is None:
                logger.debug(f"Dropping malformed landmark set for {handedness} hand")
                continue

            # Two hands with the same label: the later one wins
            if handedness == "Left":
                left_hand = signal
            else:
                right_hand = signal

        self.snapshot = TrackingSnapshot(
            left_hand=left_hand,
            right_hand=right_hand,
            is_ready=self.is_ready,
            timestamp=t_now,
        )
        return self.snapshot


class FrameLoop:
    """
    Periodic frame submission loop.

    Only one detection is in flight at a time: the next frame is not
    submitted before the previous detection has settled. Detector errors are
    logged and the cycle is skipped.
    """

    def __init__(self,
                 read_frame: Callable[[], object],
                 source: LandmarkSourceProto,
                 assembler: FrameAssembler,
                 on_snapshot: Optional[Callable[[TrackingSnapshot], Awaitable[None]]] = None,
                 on_cycle: Optional[Callable[[float], Awaitable[None]]] = None,
                 clock: Callable[[], float] = time.monotonic,
                 interval_s: float = 0.0):
        """
        Args:
            read_frame: Returns the next frame, or None when the feed has ended
            source: Landmark detector
            assembler: Frame assembler receiving the detections
            on_snapshot: Awaited with every published snapshot
            on_cycle: Awaited once per loop iteration with the current time,
                whether or not a snapshot was published
            clock: Time source in seconds
            interval_s: Pause between submissions
        """
        self.read_frame = read_frame
        self.source = source
        self.assembler = assembler
        self.on_snapshot = on_snapshot
        self.on_cycle = on_cycle
        self.clock = clock
        self.interval_s = interval_s
        self.running = False
        self.error_count = 0

    async def run(self) -> None:
        """Run until stopped or until the frame feed ends."""
        self.running = True
        logger.info("🎥 Frame loop started")

        while self.running:
            frame = self.read_frame()
            if frame is None:
                logger.info("Frame feed ended")
                break

            hands = await self._detect(frame)

            if not self.running:
                break

            if hands is not None:
                snapshot = self.assembler.process_results(hands, self.clock())
                if snapshot is not None and self.on_snapshot is not None:
                    await self.on_snapshot(snapshot)

            if self.on_cycle is not None and self.running:
                await self.on_cycle(self.clock())

            await asyncio.sleep(self.interval_s)

        self.running = False
        logger.info("🛑 Frame loop stopped")

    async def _detect(self, frame) -> Optional[List[DetectedHand]]:
        try:
            result = self.source.detect(frame)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as e:
            self.error_count += 1
            logger.warning(f"⚠️ Detection failed, skipping frame: {e}")
            return None

    def stop(self) -> None:
        """Cancel the loop; no snapshot is published after this returns."""
        self.running = False
