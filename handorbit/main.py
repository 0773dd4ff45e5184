"""
Main application: webcam hand control of a catalog of 3-D objects.
"""
import argparse
import asyncio
import logging
import time
from typing import Optional

import cv2

from .config import load_config
from .pipeline import ControlPipeline
from .renderer_mock import MockRenderer
from .tracking import HandsTracker, draw_landmarks

logger = logging.getLogger(__name__)


class GestureControlApp:
    """Main application class wiring camera, tracker, pipeline and renderer."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        self.pipeline = ControlPipeline(self.config)
        self.renderer = MockRenderer()
        self.tracker = None
        self.cap = None

        try:
            self.tracker = HandsTracker(self.config.tracker)

            # Initialize camera
            self.cap = cv2.VideoCapture(self.config.camera.index)
            self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
            self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
            self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

            if not self.cap.isOpened():
                raise RuntimeError(f"Failed to open camera {self.config.camera.index}")
        except Exception:
            self.close()
            raise

    async def run(self):
        """Run the main application loop."""
        logger.info("Starting %s", self.config.display.window_name)
        logger.info("Open hand = zoom out, fist = zoom in, drag/tilt = rotate")
        logger.info("Double pinch (index/middle) or swipe = next/previous; 'r' resets rotation, 'q' quits")

        await self.renderer.show_item(0, self.pipeline.current_item_name)

        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                break

            t_ms = time.monotonic() * 1000.0
            hands = self.tracker.process(frame, t_ms)
            previous_index = self.pipeline.state.current_index
            result = self.pipeline.process_frame(hands, t_ms)

            await self.renderer.render(result.snapshot)
            if result.snapshot.current_index != previous_index:
                await self.renderer.show_item(result.snapshot.current_index,
                                              self.pipeline.current_item_name)

            self._draw_overlay(frame, hands, result)
            cv2.imshow(self.config.display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r'):
                self.pipeline.reset_rotation()
            elif ord('1') <= key <= ord('9'):
                snapshot = self.pipeline.select(key - ord('1'))
                await self.renderer.show_item(snapshot.current_index, self.pipeline.current_item_name)

    def _draw_overlay(self, frame, hands, result) -> None:
        snap = result.snapshot
        status_text = "No hand detected"
        pose_text = ""

        if hands and result.features is not None:
            if self.config.display.show_landmarks:
                draw_landmarks(frame, hands[0])

            if self.config.display.show_palm_center:
                height, width = frame.shape[:2]
                cx, cy = result.features.palm_center[:2]
                center = (int(cx * width), int(cy * height))
                cv2.circle(frame, center, 8, (0, 0, 255), -1)
                cv2.putText(frame, "Palm", (center[0] + 10, center[1] - 10),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 0, 255), 2)

            status_text = f"Pose: {result.pose.value} ({result.pose_confidence:.2f})"
            pose_text = f"Pinch: {result.features.pinch.strength:.2f}"
            if not result.intent.is_none:
                pose_text += f" | {result.intent.kind.upper()} via {result.intent.source}"

        control_text = (f"Zoom {snap.zoom:.2f}x  Rot ({snap.rotation_x:.0f}, "
                        f"{snap.rotation_y:.0f}, {snap.rotation_z:.0f})")
        item_text = f"[{snap.current_index + 1}/{len(self.pipeline.catalog)}] {self.pipeline.current_item_name}"

        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, pose_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, control_text, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
        cv2.putText(frame, item_text, (10, 120), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 2)
        cv2.putText(frame, "Press 'r' to reset rotation, 'q' to quit", (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    def close(self) -> None:
        """Cleanup resources; safe to call more than once."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if self.tracker is not None:
            self.tracker.close()
            self.tracker = None
        cv2.destroyAllWindows()


async def main(argv=None):
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Hand gesture control of a 3-D object catalog")
    parser.add_argument("--config", help="Path to a YAML config file (defaults to the bundled one)")
    args = parser.parse_args(argv)

    app = None
    try:
        app = GestureControlApp(config_path=args.config)
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        logger.error("Error: %s", e)
        raise SystemExit(1)
    finally:
        if app is not None:
            app.close()


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
