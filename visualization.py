# visualization.py
"""
Handles the visualization of the flow field simulation using Pygame.

The Visualizer only reads simulation state. The one way it influences the
simulation is the keyboard settings surface, which hands a new
SimulationConfig to Simulation.apply_settings.
"""
import logging
import pygame
import numpy as np
from typing import Optional

from bounds import Bounds
from constants import (
    WINDOW_WIDTH, WINDOW_HEIGHT, PADDING, GRID_WIDTH, GRID_HEIGHT,
    CELL_WIDTH, CELL_HEIGHT, UI_PANEL_WIDTH, BACKGROUND_COLOR,
    FLOWFIELD_COLOR, PARTICLE_COLOR, UI_BACKGROUND_ALPHA,
    ARROW_LENGTH, ARROW_HEAD_LENGTH
)
from flow import arrow_segments
from settings import (
    SimulationConfig, VELOCITY_MODE, ACCELERATION_MODE, random_seed
)

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# settings_for_key(key: int, config: SimulationConfig) -> Optional[SimulationConfig]:
#   - Inputs: A pygame key code and the current settings.
#   - Outputs: The settings after that key press, or None if the key is
#     not bound.
#
# class Visualizer:
#   - __init__(self):
#     - Side Effects: Initializes Pygame and creates a display surface.
#       Exposes self.bounds, the simulation domain for that window.
#
#   - draw(self, simulation: "Simulation") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Renders the field, particles and UI panel. Key presses
#       are turned into new settings and applied to the simulation.

COUNT_STEP = 50
SPEED_STEP = 0.25
RATE_STEP = 0.05

KEY_HELP = [
    ("SPACE", "Pause"),
    ("B / P / F", "Background / Particles / Flowfield"),
    ("R", "New seed"),
    ("UP / DOWN", "Particle count"),
    ("LEFT / RIGHT", "Max speed"),
    ("[ / ]", "Steer rate"),
    ("; / '", "Flow influence"),
    ("M", "Integration mode"),
    ("ESC", "Quit"),
]


def settings_for_key(key: int, config: SimulationConfig) -> Optional[SimulationConfig]:
    """Maps a key press to the resulting settings snapshot."""
    if key == pygame.K_SPACE:
        return config.replace(paused=not config.paused)
    if key == pygame.K_b:
        return config.replace(draw_background=not config.draw_background)
    if key == pygame.K_p:
        return config.replace(draw_particles=not config.draw_particles)
    if key == pygame.K_f:
        return config.replace(draw_flowfield=not config.draw_flowfield)
    if key == pygame.K_r:
        return config.replace(seed=random_seed())
    if key == pygame.K_UP:
        return config.replace(particle_count=config.particle_count + COUNT_STEP)
    if key == pygame.K_DOWN:
        return config.replace(particle_count=config.particle_count - COUNT_STEP)
    if key == pygame.K_RIGHT:
        return config.replace(max_speed=config.max_speed + SPEED_STEP)
    if key == pygame.K_LEFT:
        return config.replace(max_speed=config.max_speed - SPEED_STEP)
    if key == pygame.K_RIGHTBRACKET:
        return config.replace(steer_rate=config.steer_rate + RATE_STEP)
    if key == pygame.K_LEFTBRACKET:
        return config.replace(steer_rate=config.steer_rate - RATE_STEP)
    if key == pygame.K_QUOTE:
        return config.replace(flow_influence=config.flow_influence + RATE_STEP)
    if key == pygame.K_SEMICOLON:
        return config.replace(flow_influence=config.flow_influence - RATE_STEP)
    if key == pygame.K_m:
        mode = ACCELERATION_MODE if config.integration_mode == VELOCITY_MODE else VELOCITY_MODE
        return config.replace(integration_mode=mode)
    return None


class Visualizer:
    """
    Renders the flow field and particles and provides the settings panel.
    """
    def __init__(self):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        width, height = WINDOW_WIDTH + UI_PANEL_WIDTH, WINDOW_HEIGHT
        self.screen = pygame.display.set_mode((width, height))

        self.bounds = Bounds.from_window(WINDOW_WIDTH, WINDOW_HEIGHT, PADDING)

        # The simulation area keeps its contents between frames so that
        # particles leave trails when the background is disabled.
        self.sim_surface = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.sim_surface.fill(BACKGROUND_COLOR)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        pygame.display.set_caption("Flow Field")
        self.clock = pygame.time.Clock()

        try:
            self.font_title = pygame.font.SysFont("Segoe UI", 16, bold=True)
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_title = pygame.font.SysFont(None, 20, bold=True)
            self.font_main = pygame.font.SysFont(None, 18)

        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)
        self.text_color_value = (255, 255, 255)

        # Arrows only change when the field is replaced.
        self._arrow_field = None
        self._arrows = None

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _handle_events(self, simulation: "Simulation") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False

                new_config = settings_for_key(event.key, simulation.config)
                if new_config is not None:
                    simulation.apply_settings(new_config)
        return True

    def _flow_arrows(self, simulation: "Simulation"):
        if self._arrow_field is not simulation.field:
            logging.debug("Recomputing flow-field arrows for the new field.")
            self._arrows = arrow_segments(
                simulation.field, GRID_WIDTH, GRID_HEIGHT,
                CELL_WIDTH, CELL_HEIGHT, length=ARROW_LENGTH
            )
            self._arrow_field = simulation.field
        return self._arrows

    def _draw_flowfield(self, simulation: "Simulation"):
        """Draws one arrow per grid cell, offset by the bounds origin."""
        starts, ends = self._flow_arrows(simulation)
        origin = np.array([self.bounds.origin_x, self.bounds.origin_y])
        for start, end in zip(starts + origin, ends + origin):
            pygame.draw.aaline(self.sim_surface, FLOWFIELD_COLOR, start, end)

            # Arrow head: two short strokes swept back from the tip
            heading = (end - start) / ARROW_LENGTH
            normal = np.array([-heading[1], heading[0]])
            back = end - heading * ARROW_HEAD_LENGTH
            pygame.draw.aaline(self.sim_surface, FLOWFIELD_COLOR, end, back + normal * ARROW_HEAD_LENGTH * 0.5)
            pygame.draw.aaline(self.sim_surface, FLOWFIELD_COLOR, end, back - normal * ARROW_HEAD_LENGTH * 0.5)

    def _draw_particles(self, simulation: "Simulation"):
        radius = max(simulation.config.particle_size / 2.0, 1.0)
        origin = np.array([self.bounds.origin_x, self.bounds.origin_y])
        for pos in simulation.particles.positions + origin:
            pygame.draw.circle(self.sim_surface, PARTICLE_COLOR, (int(pos[0]), int(pos[1])), radius)

    def _draw_settings_panel(self, config: SimulationConfig):
        """Renders every parameter and the key bindings in the UI panel."""
        panel_x = WINDOW_WIDTH + 20
        current_y = 15
        line_height = self.font_main.get_linesize()

        title = self.font_title.render("Settings", True, self.text_color_title)
        self.screen.blit(title, (panel_x, current_y))
        current_y += title.get_height() + 8

        for key, value in config.as_dict().items():
            display_key = key.replace('_', ' ').title()
            display_value = f"{value:.2f}" if isinstance(value, float) else str(value)
            key_surf = self.font_main.render(display_key, True, self.text_color_key)
            value_surf = self.font_main.render(display_value, True, self.text_color_value)
            self.screen.blit(key_surf, (panel_x, current_y))
            self.screen.blit(value_surf, (panel_x + 150, current_y))
            current_y += line_height

        current_y += 12
        title = self.font_title.render("Keys", True, self.text_color_title)
        self.screen.blit(title, (panel_x, current_y))
        current_y += title.get_height() + 8

        for key, action in KEY_HELP:
            key_surf = self.font_main.render(key, True, self.text_color_key)
            action_surf = self.font_main.render(action, True, self.text_color_value)
            self.screen.blit(key_surf, (panel_x, current_y))
            self.screen.blit(action_surf, (panel_x + 90, current_y))
            current_y += line_height

    def draw(self, simulation: "Simulation") -> bool:
        """
        Draws the field, particles and UI, and handles events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        if not self._handle_events(simulation):
            return False

        config = simulation.config
        if config.draw_background:
            self.sim_surface.fill(BACKGROUND_COLOR)
        if config.draw_flowfield:
            self._draw_flowfield(simulation)
        if config.draw_particles:
            self._draw_particles(simulation)

        self.screen.fill(BACKGROUND_COLOR)
        self.screen.blit(self.sim_surface, (0, 0))
        self.screen.blit(self.ui_panel_surface, (WINDOW_WIDTH, 0))
        self._draw_settings_panel(config)

        pygame.display.flip()
        return True

    def tick(self, fps: int) -> float:
        """Waits for the next frame and returns the elapsed time in seconds."""
        return self.clock.tick(fps) / 1000.0

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
