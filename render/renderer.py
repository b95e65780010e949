"""
Snake AI - Main Renderer
Pygame-based rendering system.
"""

import pygame
from typing import Optional
from config import RENDER_CONFIG
from render.hud import HUD

# Arrow keys -> absolute heading (LEFT, UP, RIGHT, DOWN)
ARROW_DIRECTIONS = {
    pygame.K_LEFT: 0,
    pygame.K_UP: 1,
    pygame.K_RIGHT: 2,
    pygame.K_DOWN: 3,
}


class Renderer:
    """Main rendering system using Pygame."""

    def __init__(self, cell_size: Optional[int] = None):
        self.config = RENDER_CONFIG
        self.cell_size = cell_size or self.config.cell_size
        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None

        # Board dimensions in cells (set on init)
        self.grid_w = 0
        self.grid_h = 0

        self.hud: Optional[HUD] = None
        self.initialized = False

    def initialize(self, grid_w: int, grid_h: int) -> tuple[int, int]:
        """Initialize Pygame and create window. Returns (width, height) in pixels."""
        pygame.init()
        pygame.font.init()

        self.grid_w = grid_w
        self.grid_h = grid_h
        width = grid_w * self.cell_size
        height = grid_h * self.cell_size + self.config.hud_height

        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(self.config.window_title)

        self.clock = pygame.time.Clock()
        self.hud = HUD(width, self.config.hud_height)

        self.initialized = True

        return (width, height)

    def shutdown(self):
        """Clean up Pygame resources."""
        if self.initialized:
            pygame.quit()
            self.initialized = False

    def process_events(self) -> dict:
        """
        Process Pygame events.
        Returns dict with 'quit' and other event flags.
        """
        result = {
            'quit': False,
            'start': False,
            'pause_toggle': False,
            'throttle_toggle': False,
            'stop': False,
            'any_key': False,
            'direction': None,
        }

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                result['quit'] = True

            elif event.type == pygame.KEYDOWN:
                result['any_key'] = True
                if event.key == pygame.K_ESCAPE:
                    result['quit'] = True
                elif event.key == pygame.K_SPACE:
                    result['throttle_toggle'] = True
                elif event.key == pygame.K_RETURN:
                    result['start'] = True
                elif event.key == pygame.K_p:
                    result['pause_toggle'] = True
                elif event.key == pygame.K_s:
                    result['stop'] = True
                elif event.key in ARROW_DIRECTIONS:
                    result['direction'] = ARROW_DIRECTIONS[event.key]

        return result

    def render(self, snapshot: dict, hud_lines: list[str]):
        """Draw board, snake, food and HUD for one frame."""
        if not self.initialized:
            return

        self.screen.fill(self.config.color_background)
        top = self.config.hud_height
        size = self.cell_size

        # Checkerboard bg
        for y in range(self.grid_h):
            for x in range(self.grid_w):
                rect = (x * size, top + y * size, size, size)
                color = self.config.color_cell_even if (x + y) % 2 == 0 else self.config.color_cell_odd
                pygame.draw.rect(self.screen, color, rect)

        food = snapshot['food']
        if food is not None:
            fx, fy = food
            inset = max(1, size // 4)
            f_rect = (fx * size + inset, top + fy * size + inset, size - 2 * inset, size - 2 * inset)
            pygame.draw.rect(self.screen, self.config.color_food, f_rect)

        for px, py in snapshot['snake']:
            if not (0 <= px < self.grid_w and 0 <= py < self.grid_h):
                continue  # Head that just left the board
            p_rect = (px * size, top + py * size, size, size)
            pygame.draw.rect(self.screen, self.config.color_snake, p_rect)
            pygame.draw.rect(self.screen, self.config.color_snake_border, p_rect, 2)

        self.hud.draw(self.screen, hud_lines)
        pygame.display.flip()

    def tick(self) -> float:
        """Advance the frame clock. Returns delta time in seconds."""
        return self.clock.tick(self.config.fps) / 1000.0
