"""
Camera demo for the hand-tracked gallery.
"""
import argparse
import asyncio
import logging
import os
from typing import List, Optional

import cv2
import uvicorn
from dotenv import load_dotenv

from .config import load_config
from .detector import HandsTracker, draw_cursor, draw_landmarks
from .presenter_mock import MockPresenter
from .server import SnapshotBroadcaster, create_app
from .session import InteractionSession
from .tracking import FrameAssembler, FrameLoop
from .types import InteractionEvent, PresenterProto, TrackingSnapshot

logger = logging.getLogger(__name__)

LEFT_COLOR = (250, 165, 96)  # BGR
RIGHT_COLOR = (128, 222, 74)


class GestureGalleryApp:
    """Main application class for the hand-tracked gallery."""

    def __init__(self, config_path: Optional[str] = None, serve: bool = False):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(self.config.mediapipe)
        self.assembler = FrameAssembler(self.config.classifier, self.config.tracking)
        self.session = InteractionSession(self.config)

        self.presenters: List[PresenterProto] = [MockPresenter()]
        self.broadcaster: Optional[SnapshotBroadcaster] = None
        if serve:
            self.broadcaster = SnapshotBroadcaster(self.session)
            self.presenters.append(self.broadcaster)

        self.frame = None
        self.snapshot = TrackingSnapshot()
        self.quit_requested = False
        self.closed = False

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

        self.assembler.mark_ready()
        self.frame_loop = FrameLoop(
            read_frame=self._read_frame,
            source=self.tracker,
            assembler=self.assembler,
            on_snapshot=self._on_snapshot,
            on_cycle=self._on_cycle,
        )

    def _read_frame(self):
        if self.quit_requested:
            return None
        ret, frame = self.cap.read()
        if not ret:
            logger.error("Failed to read frame from camera")
            return None
        self.frame = frame
        return frame

    async def _dispatch(self, events: List[InteractionEvent]) -> None:
        for event in events:
            for presenter in self.presenters:
                await presenter.on_event(event)

    async def _on_snapshot(self, snapshot: TrackingSnapshot) -> None:
        self.snapshot = snapshot
        for presenter in self.presenters:
            await presenter.on_snapshot(snapshot)
        await self._dispatch(self.session.update(snapshot, snapshot.timestamp))

    async def _on_cycle(self, t_now: float) -> None:
        await self._dispatch(self.session.poll(t_now))
        self._render()

    def _render(self) -> None:
        if self.frame is None:
            return

        frame = cv2.flip(self.frame, 1)
        height, width = frame.shape[:2]
        layout_cfg = self.config.layout

        # Gallery boundary and dismiss zone
        split_x = int(width * layout_cfg.main_view_fraction)
        cv2.line(frame, (split_x, 0), (split_x, height), (255, 255, 255), 1)
        if self.session.move_dismiss.is_dragging:
            zone_y = int(height * (1 - self.config.viewer.dismiss_zone_fraction))
            color = (68, 68, 239) if self.session.move_dismiss.in_dismiss_zone else (120, 120, 120)
            cv2.rectangle(frame, (0, zone_y), (split_x, height), color, 2)

        for hand, color in ((self.snapshot.left_hand, LEFT_COLOR), (self.snapshot.right_hand, RIGHT_COLOR)):
            if hand is None:
                continue
            if self.config.display.show_landmarks:
                frame = draw_landmarks(frame, hand.landmarks)
            if self.config.display.show_cursors:
                frame = draw_cursor(frame, hand, color)

        status = "Hands Ready" if self.snapshot.is_ready else "Loading..."
        selected = self.session.selected
        viewer = f"Zoom {self.session.zoom_pan.zoom:.1f}x" if selected else "Pinch an item to open it"
        cv2.putText(frame, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, f"Open: {selected.title if selected else '-'}", (10, 60),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
        cv2.putText(frame, viewer, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
        cv2.putText(frame, "Right: Select & Drag  Left: Zoom & Pan  Thumbs: Next/Prev",
                    (10, height - 40), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Press 'q' to quit", (10, height - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        cv2.imshow(self.config.display.window_name, frame)
        if cv2.waitKey(1) & 0xFF == ord('q'):
            self.quit_requested = True
            self.frame_loop.stop()

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")

        tasks = [self.frame_loop.run()]
        server = None
        if self.broadcaster is not None:
            server = uvicorn.Server(uvicorn.Config(
                create_app(self.broadcaster),
                host=self.config.server.host,
                port=self.config.server.port,
                log_level=self.config.logging.level.lower(),
            ))
            logger.info(f"🌐 Streaming on ws://{self.config.server.host}:{self.config.server.port}/ws")
            tasks.append(server.serve())

        async def _stop_server_when_done():
            await tasks[0]
            if server is not None:
                server.should_exit = True

        try:
            await asyncio.gather(_stop_server_when_done(), *tasks[1:])
        finally:
            self.close()

    def close(self):
        """Cleanup resources."""
        if self.closed:
            return
        self.closed = True
        self.frame_loop.stop()
        self.session.teardown()
        self.tracker.close()
        if self.cap.isOpened():
            self.cap.release()
        cv2.destroyAllWindows()


async def main():
    """Entry point for the application."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Hand-tracked image gallery")
    parser.add_argument("--config", default=os.getenv("HANDGALLERY_CONFIG"),
                        help="Path to a YAML config (defaults to the packaged one)")
    parser.add_argument("--serve", action="store_true",
                        help="Stream snapshots and events over a WebSocket")
    args = parser.parse_args()

    level = load_config(args.config).logging.level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))

    app = None
    try:
        app = GestureGalleryApp(config_path=args.config, serve=args.serve)
        await app.run()
    except KeyboardInterrupt:
        logger.info("\nApplication interrupted by user")
        if app is not None:
            app.close()
    except RuntimeError as e:
        logger.error(f"❌ {e}")


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
