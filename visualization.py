# visualization.py
"""
Hosts the animation in a Pygame window.

The Visualizer owns the display, paces frames, handles input and draws the
configuration panel. The panel edits a pending copy of the configuration;
pressing Apply hands a complete replacement record to a callback that is
registered once, when the application is wired together.
"""
import logging
import pygame
from typing import Callable, Dict, Optional, Tuple

from configuration import AnimationConfig, ConfigEditor, ConfigurationError, EDITABLE_FIELDS
from constants import (
    BACKGROUND_COLOR, FPS, FULLSCREEN, UI_BACKGROUND_ALPHA, UI_PANEL_WIDTH,
    UI_ROW_HEIGHT, WINDOW_HEIGHT, WINDOW_WIDTH
)


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, config: AnimationConfig):
#     - Side Effects: Initializes Pygame and creates a display surface.
#       sim_width/sim_height give the animation area beside the UI panel.
#
#   - set_apply_handler(self, handler: Callable[[AnimationConfig], None]) -> None:
#     - Side Effects: Stores the one callback fired when Apply is pressed.
#
#   - present(self, surface: pygame.Surface) -> bool:
#     - Inputs: the animation surface rendered for this frame.
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Handles events, draws the frame and UI, flips the
#       display and waits for the next frame slot.

class Visualizer:
    """
    Presents rendered frames and provides the configuration panel.
    """
    def __init__(self, config: AnimationConfig):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        if FULLSCREEN:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = WINDOW_WIDTH + UI_PANEL_WIDTH, WINDOW_HEIGHT
            self.screen = pygame.display.set_mode((width, height))

        # The animation area is the total width minus the UI panel
        self.sim_width = width - UI_PANEL_WIDTH
        self.sim_height = height

        # Per-pixel alpha so a "transparent" background shows the window colour.
        self.sim_surface = pygame.Surface((self.sim_width, self.sim_height), pygame.SRCALPHA)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, self.sim_height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        pygame.display.set_caption("Drifting Sprites")
        self.clock = pygame.time.Clock()

        try:
            self.font_title = pygame.font.SysFont("Segoe UI", 16, bold=True)
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_title = pygame.font.SysFont(None, 20, bold=True)
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        # --- Panel layout ---
        self.param_box_spacing = 4 # Vertical pixels between each parameter box
        self.panel_x = self.sim_width + 20
        self.panel_width = UI_PANEL_WIDTH - 40
        self.title_y = 12
        rows_top = self.title_y + 30
        self.row_rects: Dict[str, pygame.Rect] = {}
        for i, row in enumerate(EDITABLE_FIELDS):
            self.row_rects[row.key] = pygame.Rect(
                self.panel_x, rows_top + i * (UI_ROW_HEIGHT + self.param_box_spacing),
                self.panel_width, UI_ROW_HEIGHT
            )
        buttons_y = rows_top + len(EDITABLE_FIELDS) * (UI_ROW_HEIGHT + self.param_box_spacing) + 10
        half = (self.panel_width - 6) // 2
        self.apply_button_rect = pygame.Rect(self.panel_x, buttons_y, half, 30)
        self.reset_button_rect = pygame.Rect(self.panel_x + half + 6, buttons_y, half, 30)
        self.hint_y = self.apply_button_rect.bottom + 12
        self.hovered_key: Optional[str] = None

        # --- UI Color Palette ---
        self.button_color = (80, 80, 80)
        self.button_hover_color = (110, 110, 110)
        self.button_pending_color = (40, 120, 70)
        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)   # Brighter grey for keys
        self.text_color_value = (255, 255, 255) # Pure white for values
        self.text_color_pending = (255, 220, 120)
        self.param_box_color = (60, 60, 60, 160)
        self.param_box_hover_color = (90, 90, 90, 200)

        self.editor = ConfigEditor(config)
        self._apply_handler: Optional[Callable[[AnimationConfig], None]] = None

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def set_apply_handler(self, handler: Callable[[AnimationConfig], None]) -> None:
        """Registers the callback that receives applied configurations."""
        if self._apply_handler is not None:
            logging.warning("Replacing an existing apply handler.")
        self._apply_handler = handler

    def _row_at(self, pos: Tuple[int, int]) -> Optional[str]:
        for key, rect in self.row_rects.items():
            if rect.collidepoint(pos):
                return key
        return None

    def _apply(self) -> None:
        """Validates the pending edits and hands them to the apply handler."""
        try:
            new_config = self.editor.build()
        except ConfigurationError as e:
            logging.error(f"Pending configuration rejected, keeping the current one: {e}")
            return
        if self._apply_handler is None:
            logging.warning("Apply pressed but no handler is registered.")
            return
        try:
            self._apply_handler(new_config)
        except (OSError, ValueError) as e:
            logging.error(f"Applying the configuration failed, keeping the current one: {e}")
            return
        self.editor.reset(new_config)

    def _format_value(self, kind: str, value) -> str:
        if kind == "bool":
            return "On" if value else "Off"
        if kind == "float":
            return f"{value:.2f}"
        return str(value)

    def _draw_parameters(self):
        """Renders each editable parameter in its own transparent box."""
        title = self.font_title.render("Configuration", True, self.text_color_title)
        self.screen.blit(title, (self.panel_x, self.title_y))

        box_surface = pygame.Surface((self.panel_width, UI_ROW_HEIGHT), pygame.SRCALPHA)
        for row in EDITABLE_FIELDS:
            rect = self.row_rects[row.key]
            box_color = self.param_box_hover_color if row.key == self.hovered_key else self.param_box_color
            box_surface.fill((0, 0, 0, 0))
            pygame.draw.rect(box_surface, box_color, box_surface.get_rect(), border_radius=6)
            self.screen.blit(box_surface, rect.topleft)

            value = self.editor.value(row.key)
            changed = value != self.editor.baseline_value(row.key)
            key_surf = self.font_main_bold.render(row.label, True, self.text_color_key)
            value_color = self.text_color_pending if changed else self.text_color_value
            value_surf = self.font_main.render(self._format_value(row.kind, value), True, value_color)

            self.screen.blit(key_surf, key_surf.get_rect(midleft=(rect.left + 8, rect.centery)))
            self.screen.blit(value_surf, value_surf.get_rect(midright=(rect.right - 8, rect.centery)))

    def _draw_button(self, rect: pygame.Rect, label: str, mouse_pos: Tuple[int, int], highlight: bool = False):
        """Draws a button and handles its hover state."""
        if rect.collidepoint(mouse_pos):
            color = self.button_hover_color
        elif highlight:
            color = self.button_pending_color
        else:
            color = self.button_color
        pygame.draw.rect(self.screen, color, rect, border_radius=5)
        text_surf = self.font_main.render(label, True, self.text_color_title)
        self.screen.blit(text_surf, text_surf.get_rect(center=rect.center))

    def _draw_hints(self):
        lines = ("Scroll to change numbers.", "Click to toggle options.", "Esc to quit.")
        line_height = self.font_main.get_linesize()
        for i, line in enumerate(lines):
            surf = self.font_main.render(line, True, self.text_color_key)
            self.screen.blit(surf, (self.panel_x, self.hint_y + i * line_height))

    def handle_events(self) -> bool:
        """
        Processes pending Pygame events.

        Returns:
            bool: False if the animation should exit, True otherwise.
        """
        mouse_pos = pygame.mouse.get_pos()
        self.hovered_key = self._row_at(mouse_pos)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.apply_button_rect.collidepoint(mouse_pos):
                    self._apply()
                elif self.reset_button_rect.collidepoint(mouse_pos):
                    self.editor.discard()
                    logging.info("Pending configuration edits discarded by user.")
                elif self.hovered_key:
                    self.editor.activate(self.hovered_key)
                    logging.debug(f"Toggled {self.hovered_key} to {self.editor.value(self.hovered_key)}.")

            if event.type == pygame.MOUSEWHEEL and self.hovered_key:
                # event.y is 1 for scroll up, -1 for scroll down
                old_value = self.editor.value(self.hovered_key)
                self.editor.adjust(self.hovered_key, event.y)
                logging.debug(
                    f"Pending {self.hovered_key} changed. "
                    f"Old: {old_value}, New: {self.editor.value(self.hovered_key)}"
                )
        return True

    def present(self, surface: pygame.Surface) -> bool:
        """
        Shows a rendered frame with the UI panel and waits for the next frame.

        Returns:
            bool: False if the animation should exit, True otherwise.
        """
        if not self.handle_events():
            return False

        mouse_pos = pygame.mouse.get_pos()
        self.screen.fill(BACKGROUND_COLOR)
        self.screen.blit(surface, (0, 0))

        self.screen.blit(self.ui_panel_surface, (self.sim_width, 0))
        self._draw_parameters()
        self._draw_button(self.apply_button_rect, "Apply", mouse_pos, highlight=self.editor.dirty)
        self._draw_button(self.reset_button_rect, "Reset", mouse_pos)
        self._draw_hints()

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
