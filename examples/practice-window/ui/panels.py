"""Banner, feature panel, upcoming sidebar and status bar."""
from __future__ import annotations

import pygame

from practempo import DisplayStatus, format_duration

from game.sinks import WindowDisplay
from ui.constants import (
    BANNER_H,
    BANNER_TEXT,
    BORDER,
    DEFAULT_BANNER,
    DONE_COLOR,
    ERROR_COLOR,
    FLASH_ALPHA,
    FLASH_MS,
    LINE_H,
    PAD,
    SCREEN_H,
    SCREEN_W,
    SIDEBAR_BG,
    SIDEBAR_W,
    STATUS_BG,
    STATUS_H,
    TEXT_COLOR,
    TEXT_DIM,
    WARMUP_COLOR,
)

STATUS_LABELS = {
    DisplayStatus.PLAY: "PLAYING",
    DisplayStatus.PAUSE: "PAUSED",
    DisplayStatus.STOP: "STOPPED",
}


def _color(value: str) -> pygame.Color:
    try:
        return pygame.Color(value)
    except ValueError:
        return pygame.Color(DEFAULT_BANNER)


def draw_banner(
    surface: pygame.Surface,
    big: pygame.font.Font,
    font: pygame.font.Font,
    display: WindowDisplay,
) -> None:
    """Task name on the interval color, with elapsed and total time."""
    if display.complete:
        pygame.draw.rect(surface, DONE_COLOR, (0, 0, SCREEN_W, BANNER_H))
        surface.blit(big.render("DONE!", True, BANNER_TEXT), (PAD, PAD))
        total = format_duration(display.total_elapsed)
        surface.blit(font.render(f"Practiced {total}", True, BANNER_TEXT), (PAD, BANNER_H - 30))
        return

    color = _color(display.color) if display.color else pygame.Color(DEFAULT_BANNER)
    pygame.draw.rect(surface, color, (0, 0, SCREEN_W, BANNER_H))

    title = display.task or "(Untitled)"
    surface.blit(big.render(title, True, BANNER_TEXT), (PAD, PAD))
    if display.intro_active:
        x = PAD + big.size(title)[0] + 10
        surface.blit(font.render("(Warmup)", True, BANNER_TEXT), (x, PAD + 10))

    elapsed = big.render(format_duration(display.elapsed), True, BANNER_TEXT)
    surface.blit(elapsed, (SCREEN_W - elapsed.get_width() - PAD, PAD))
    total = (
        f"{format_duration(display.total_elapsed)} / "
        f"{format_duration(display.total_duration)}"
    )
    surface.blit(font.render(total, True, BANNER_TEXT), (PAD, BANNER_H - 30))


def draw_feature(surface: pygame.Surface, font: pygame.font.Font, display: WindowDisplay) -> None:
    if display.feature is None:
        return
    y = BANNER_H + PAD
    for line in display.feature:
        surface.blit(font.render(str(line), True, TEXT_COLOR), (PAD, y))
        y += LINE_H


def draw_upcoming(surface: pygame.Surface, font: pygame.font.Font, display: WindowDisplay) -> None:
    """Next intervals in the right-hand sidebar, closed by END when in view."""
    x = SCREEN_W - SIDEBAR_W
    h = SCREEN_H - BANNER_H - STATUS_H
    pygame.draw.rect(surface, SIDEBAR_BG, (x, BANNER_H, SIDEBAR_W, h))
    pygame.draw.line(surface, BORDER, (x, BANNER_H), (x, BANNER_H + h))

    y = BANNER_H + PAD
    surface.blit(font.render("UP NEXT", True, TEXT_DIM), (x + PAD, y))
    y += LINE_H + 4
    for interval in display.upcoming:
        swatch = _color(interval.color) if interval.color else pygame.Color(DEFAULT_BANNER)
        pygame.draw.rect(surface, swatch, (x + PAD, y + 4, 10, 10))
        label = f"{interval.task or '(Untitled)'}  {format_duration(interval.duration)}"
        surface.blit(font.render(label, True, TEXT_COLOR), (x + PAD + 16, y))
        y += LINE_H
    if display.end_visible:
        surface.blit(font.render("END", True, TEXT_DIM), (x + PAD + 16, y))


def draw_status_bar(
    surface: pygame.Surface,
    font: pygame.font.Font,
    display: WindowDisplay,
    message: str | None,
) -> None:
    y = SCREEN_H - STATUS_H
    pygame.draw.rect(surface, STATUS_BG, (0, y, SCREEN_W, STATUS_H))
    status = STATUS_LABELS[display.status]
    if display.status is DisplayStatus.PLAY and display.intro_active:
        status += " - warmup"
    color = WARMUP_COLOR if display.intro_active else TEXT_COLOR
    surface.blit(font.render(status, True, color), (PAD, y + 8))
    if message:
        surface.blit(font.render(message, True, ERROR_COLOR), (160, y + 8))
    hint = font.render("Space play/pause  S skip  R reset  Esc quit", True, TEXT_DIM)
    surface.blit(hint, (SCREEN_W - hint.get_width() - PAD, y + 8))


def draw_placeholder(surface: pygame.Surface, big: pygame.font.Font, text: str) -> None:
    label = big.render(text, True, TEXT_DIM)
    rect = label.get_rect(center=(SCREEN_W // 2, (SCREEN_H - STATUS_H) // 2))
    surface.blit(label, rect)


def draw_flash(surface: pygame.Surface, display: WindowDisplay) -> None:
    """White overlay that fades out after an interval boundary."""
    remaining = display.flash_remaining()
    if remaining <= 0:
        return
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((255, 255, 255, FLASH_ALPHA * remaining // FLASH_MS))
    surface.blit(overlay, (0, 0))
