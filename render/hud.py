"""
Snake AI - HUD (Heads-Up Display)
Score, episode and trainer status strip above the board.
"""

import pygame
from config import RENDER_CONFIG


class HUD:
    """Minimal heads-up display for training stats."""

    def __init__(self, screen_width: int, height: int):
        self.screen_width = screen_width
        self.height = height
        self.config = RENDER_CONFIG

        pygame.font.init()
        self.font = pygame.font.SysFont('Consolas', self.config.hud_font_size)
        self.padding = 6

    def draw(self, screen: pygame.Surface, lines: list[str]):
        """Draw up to two status lines; the first is highlighted."""
        pygame.draw.rect(screen, self.config.color_background, (0, 0, self.screen_width, self.height))
        for i, text in enumerate(lines[:2]):
            color = self.config.color_accent if i == 0 else self.config.color_text
            surface = self.font.render(text, True, color)
            screen.blit(surface, (self.padding, self.padding + i * (self.config.hud_font_size + 4)))
