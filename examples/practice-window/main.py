"""Practice Window - a pygame front end for a practice schedule.

Controls:
  Space   Start / pause
  S       Skip to the next interval
  R       Reset (reload and rebuild the schedule)
  Esc     Quit
"""
from __future__ import annotations

import argparse
import logging
import sys

import pygame

from practempo import (
    MonotonicTickSource,
    Schedule,
    ScheduleBuilder,
    StructuralError,
    Status,
    load_document,
)
from practempo.builder import PLACEHOLDER_EMPTY
from practempo.config import WARMUP_EACH, WARMUP_FIRST, Settings

from game.features import make_registry
from game.sinks import WindowAudio, WindowDisplay
from ui.constants import BG_COLOR, FEATURE_H, FPS, SAMPLE_RATE, SCREEN_H, SCREEN_W
from ui.panels import (
    draw_banner,
    draw_feature,
    draw_flash,
    draw_placeholder,
    draw_status_bar,
    draw_upcoming,
)

logger = logging.getLogger("practice-window")


class SessionState:
    """Owns the builder, the tick source and the current schedule."""

    def __init__(self, path: str, settings: Settings, audio: WindowAudio) -> None:
        self.path = path
        self.settings = settings
        self.builder = ScheduleBuilder(settings, make_registry())
        self.display = WindowDisplay()
        self.audio = audio
        self.ticks = MonotonicTickSource()
        self.schedule: Schedule | None = None
        self.placeholder: str | None = None
        self.message: str | None = None
        self.reset()

    def reset(self) -> None:
        """Reload the document and build a fresh, prepared schedule."""
        if self.schedule is not None:
            self.schedule.pause()
        self.display.reset()
        self.schedule = None
        self.message = None

        try:
            doc = load_document(self.path)
        except (OSError, StructuralError) as e:
            logger.error(f"cannot load {self.path}: {e}")
            self.placeholder = "Cannot load schedule"
            self.message = str(e)
            return

        result = self.builder.build(doc.items, max_render_height=FEATURE_H)
        for diag in result.diagnostics:
            logger.warning(str(diag))
        if result.diagnostics:
            self.message = f"{len(result.diagnostics)} row(s) skipped, see log"

        placeholder = result.placeholder()
        if placeholder is not None:
            self.placeholder = (
                "Load/Create Schedule" if placeholder == PLACEHOLDER_EMPTY
                else "Schedule has errors"
            )
            return

        self.placeholder = None
        self.schedule = Schedule(
            result.intervals, self.display, self.audio, self.ticks, self.settings
        )
        self.schedule.prepare()

    def toggle(self) -> None:
        if self.schedule is None:
            return
        if self.schedule.status is Status.RUNNING:
            self.schedule.pause()
        else:
            self.schedule.start()

    def skip(self) -> None:
        if self.schedule is not None:
            self.schedule.skip()


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Practice Window - pygame practice timer")
    p.add_argument("schedule", help="Path to a schedule JSON document")
    p.add_argument(
        "--warmup", type=int, default=0, help="Warmup seconds per interval (default: 0)"
    )
    p.add_argument(
        "--warmup-applies-to",
        choices=[WARMUP_FIRST, WARMUP_EACH],
        default=WARMUP_FIRST,
        help="Apply the warmup to the first interval or to each (default: first)",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    args = p.parse_args()
    return args


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    pygame.mixer.pre_init(frequency=SAMPLE_RATE, size=-16, channels=1)
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption("Practice Window")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)
    big = pygame.font.SysFont("monospace", 32, bold=True)

    settings = Settings(warmup_period=args.warmup, warmup_applies_to=args.warmup_applies_to)
    state = SessionState(args.schedule, settings, WindowAudio())

    running = True
    while running:
        clock.tick(FPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    state.toggle()
                elif event.key == pygame.K_s:
                    state.skip()
                elif event.key == pygame.K_r:
                    state.reset()

        # --- Time ---
        try:
            state.ticks.pump()
        except Exception as e:
            # The schedule has already paused itself and logged the traceback.
            state.message = f"paused after error: {e}"

        # --- Render ---
        screen.fill(BG_COLOR)
        if state.placeholder is not None:
            draw_placeholder(screen, big, state.placeholder)
        else:
            draw_banner(screen, big, font, state.display)
            draw_feature(screen, font, state.display)
            draw_upcoming(screen, font, state.display)
        draw_status_bar(screen, font, state.display, state.message)
        draw_flash(screen, state.display)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
