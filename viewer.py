# viewer.py

"""
================================================================================
INTERACTIVE WORLEY NOISE VIEWER
================================================================================
A small Pygame front end for the NoiseEngine. It forwards window and mouse
events to the engine and repaints only when the background RedrawPoller
reports a change.

Controls:
    - Drag a feature marker with the left mouse button to move it.
    - 1 / 2 / 3: linear / logarithmic / exponential scale.
    - F: toggle feature markers.   R: reseed.   ESC: quit.

Usage:
    python viewer.py [--config path/to/viewer_config.json]
================================================================================
"""
import argparse
import json
import logging
import sys

import pygame

from worley_noise import InvalidScaleConfigurationError, NoiseEngine, RedrawPoller, ScaleKind

# --- Application Constants (Rule 1) ---
DEFAULT_SCREEN_WIDTH = 960
DEFAULT_SCREEN_HEIGHT = 540
BACKGROUND_COLOR = (0, 0, 0)
CLOCK_TICK_RATE = 60
# Posted by the poller thread; handled on the main thread.
REDRAW_EVENT = pygame.USEREVENT + 1

SCALE_KEYS = {
    pygame.K_1: ScaleKind.LINEAR,
    pygame.K_2: ScaleKind.LOGARITHMIC,
    pygame.K_3: ScaleKind.EXPONENTIAL,
}


def load_config(config_path: str | None, logger: logging.Logger) -> dict:
    """Loads the viewer configuration file, or returns an empty config."""
    if config_path is None:
        return {}
    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        return json.load(f)


class ViewerApp:
    """The main application class for the noise viewer."""
    def __init__(self, config: dict):
        self.logger = logging.getLogger(__name__)
        display_config = config.get('display', {})

        # --- Core engine first so a bad scale fails before a window opens ---
        self.engine = NoiseEngine(config=config.get('noise_parameters', {}), logger=self.logger)

        self.logger.info("Initializing Pygame...")
        pygame.init()
        self.screen_width = display_config.get('screen_width', DEFAULT_SCREEN_WIDTH)
        self.screen_height = display_config.get('screen_height', DEFAULT_SCREEN_HEIGHT)
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        pygame.display.set_caption("Worley Noise")

        self.clock = pygame.time.Clock()
        self._overlay_surface = None
        self.is_running = True

        self.engine.on_resize(self.screen_width, self.screen_height)
        self.poller = RedrawPoller(
            self.engine,
            request_redraw=lambda: pygame.event.post(pygame.event.Event(REDRAW_EVENT)),
            poll_interval=self.engine.settings['poll_interval_s'],
            logger=self.logger,
        )

    def run(self):
        """The main application loop."""
        self.poller.start()
        try:
            while self.is_running:
                self.handle_events()
                self.clock.tick(CLOCK_TICK_RATE)
        finally:
            self.poller.stop()
            self.poller.join(timeout=1.0)
            self.logger.info("Exiting viewer.")
            pygame.quit()

    def handle_events(self):
        """Processes user input, resize and redraw requests."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = self.screen.get_size()
                self.engine.on_resize(self.screen_width, self.screen_height)
            elif event.type == pygame.MOUSEMOTION:
                self._handle_mouse_motion(*event.pos)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.engine.on_drag_start()
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_ARROW)
                self.engine.on_drag_end()
            elif event.type == REDRAW_EVENT:
                self.draw()

    def _handle_key(self, key):
        if key == pygame.K_ESCAPE:
            self.is_running = False
        elif key in SCALE_KEYS:
            self.engine.set_scale(SCALE_KEYS[key])
        elif key == pygame.K_f:
            self.engine.toggle_features()
        elif key == pygame.K_r:
            self.engine.on_resize(self.screen_width, self.screen_height)

    def _handle_mouse_motion(self, x: int, y: int):
        if self.engine.is_dragging:
            self.engine.on_drag_move(x, y)
            return
        handle = self.engine.on_hover(x, y)
        pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_HAND if handle is not None else pygame.SYSTEM_CURSOR_ARROW)

    def draw(self):
        """Paints the published cells and feature markers."""
        screen_size = self.screen.get_size()
        if self._overlay_surface is None or self._overlay_surface.get_size() != screen_size:
            self._overlay_surface = pygame.Surface(screen_size, pygame.SRCALPHA)

        cells = self.engine.renderable_cells()
        markers = self.engine.feature_markers()

        self.screen.fill(BACKGROUND_COLOR)
        # Filling an SRCALPHA surface stores the alpha as-is; blending happens on blit.
        self._overlay_surface.fill((0, 0, 0, 0))
        for rect, color in cells:
            self._overlay_surface.fill(color, rect)
        self.screen.blit(self._overlay_surface, (0, 0))

        for rect, color in markers:
            pygame.draw.ellipse(self.screen, color, rect)

        visible, total, percent = self.engine.stats()
        pygame.display.set_caption(
            f"Worley Noise | {self.engine.scale_kind.value} | {visible:,} cells ({percent:.2f}%)"
        )
        pygame.display.flip()


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger("Viewer")

    parser = argparse.ArgumentParser(description="Interactive Worley noise viewer.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON file with 'noise_parameters' and 'display' sections."
    )
    args = parser.parse_args()

    try:
        config = load_config(args.config, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        sys.exit(1)

    try:
        app = ViewerApp(config)
    except InvalidScaleConfigurationError as e:
        logger.critical(f"Invalid scale configuration: {e}")
        sys.exit(1)
    app.run()


if __name__ == '__main__':
    main()
