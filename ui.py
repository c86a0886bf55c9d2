# -*- coding: utf-8 -*-
"""
ui.py

Pygame front end for the circuit simulator:
- Component palette and drag-and-drop placement onto the canvas
- Moving and removing placed components
- Pin selection for the LED and push button
- Start/Stop of the simulation and the generated sketch panel
"""

import sys
import logging
from typing import Callable, List, Tuple, Optional, Dict, Any

import pygame

from config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS, WINDOW_TITLE, SIM_TICK_MS, SKETCH_PATH,
    PIN_MIN, PIN_MAX, WHITE, BLACK, GRAY, LIGHT_GRAY, DARK_GRAY, RED, GREEN, BLUE,
    YELLOW, GRID_COLOR, PALETTE_BG, PALETTE_WIDTH, PROPERTIES_WIDTH, TOOLBAR_HEIGHT,
    CODE_PANEL_HEIGHT, GRID_SIZE,
)
from circuit import Circuit, Component, DISPLAY_NAMES, TYPE_BOARD, TYPE_LED, TYPE_BUTTON
from code_generator import CodeGenerator
from simulator import SimulationEngine, PygameTimer, SIM_TICK_EVENT

# Component Palette Items
PALETTE_ITEMS = [
    {"type": TYPE_BOARD, "label": DISPLAY_NAMES[TYPE_BOARD], "color": (0, 120, 120)},
    {"type": TYPE_LED, "label": DISPLAY_NAMES[TYPE_LED], "color": RED},
    {"type": TYPE_BUTTON, "label": DISPLAY_NAMES[TYPE_BUTTON], "color": (100, 100, 100)},
]
PALETTE_ITEM_HEIGHT = 60
PALETTE_PADDING = 10
PIN_ROW_HEIGHT = 28


# --- Helper Functions ---
def draw_text(surface: pygame.Surface, text: str, pos: Tuple[int, int], font: pygame.font.Font, color: Tuple[int, int, int] = BLACK):
    """Renders text onto a surface."""
    text_surface = font.render(text, True, color)
    surface.blit(text_surface, text_surface.get_rect(topleft=pos))


class Button:
    """A clickable toolbar button."""

    def __init__(self, rect: pygame.Rect, text: str, id: str, color: Tuple[int, int, int] = BLUE):
        self.rect = rect
        self.text = text
        self.id = id
        self.color = color
        self.visible = True

    def hit(self, pos: Tuple[int, int]) -> bool:
        return self.visible and self.rect.collidepoint(pos)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font):
        if not self.visible:
            return
        pygame.draw.rect(surface, self.color, self.rect, border_radius=4)
        label = font.render(self.text, True, WHITE)
        surface.blit(label, label.get_rect(center=self.rect.center))


class MessageBox:
    """
    Operator notice. Any click dismisses it.

    With `on_confirm` set it becomes a Yes/No question; only a click on
    Yes runs the callback.
    """

    def __init__(self, message: str, title: str = "Notice", on_confirm: Optional[Callable[[], None]] = None):
        self.message = message
        self.title = title
        self.on_confirm = on_confirm
        self.rect = pygame.Rect(0, 0, 460, 120)
        self.rect.center = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        self.yes_rect = pygame.Rect(self.rect.right - 190, self.rect.bottom - 40, 80, 28)
        self.no_rect = pygame.Rect(self.rect.right - 100, self.rect.bottom - 40, 80, 28)

    def click(self, pos: Tuple[int, int]):
        """Handle the click that closes the box."""
        if self.on_confirm is not None and self.yes_rect.collidepoint(pos):
            self.on_confirm()

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, small_font: pygame.font.Font):
        pygame.draw.rect(surface, LIGHT_GRAY, self.rect, border_radius=6)
        pygame.draw.rect(surface, DARK_GRAY, self.rect, 2, border_radius=6)
        draw_text(surface, self.title, (self.rect.left + 15, self.rect.top + 12), font, RED)
        draw_text(surface, self.message, (self.rect.left + 15, self.rect.top + 50), small_font)
        if self.on_confirm is None:
            draw_text(surface, "(click to dismiss)", (self.rect.left + 15, self.rect.bottom - 25), small_font, DARK_GRAY)
            return
        for rect, text, color in ((self.yes_rect, "Yes", RED), (self.no_rect, "No", DARK_GRAY)):
            pygame.draw.rect(surface, color, rect, border_radius=4)
            label = small_font.render(text, True, WHITE)
            surface.blit(label, label.get_rect(center=rect.center))


class VisualBuilderUI:
    """Manages the Pygame UI for the visual circuit builder and simulator."""

    def __init__(self, circuit: Optional[Circuit] = None, tick_ms: int = SIM_TICK_MS):
        """Initialize Pygame, screen, fonts, and UI state."""
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 24)
        self.small_font = pygame.font.SysFont(None, 18)
        self.code_font = pygame.font.SysFont("monospace", 15)

        self.circuit = circuit if circuit is not None else Circuit()
        self.code_generator = CodeGenerator()
        self.code_text = self.code_generator.generate_code(self.circuit)
        self.running = True

        # UI State
        self.dragging_type: Optional[str] = None  # palette item being dragged
        self.drag_pos: Optional[Tuple[int, int]] = None
        self.dragging_component: Optional[Component] = None
        self.drag_offset: Tuple[int, int] = (0, 0)
        self.selected_component: Optional[Component] = None
        self.pressed_button_id: Optional[str] = None
        self.show_code = False
        self.notice: Optional[MessageBox] = None
        self.status_message = "Drag parts from the palette onto the canvas."

        self.engine = SimulationEngine(
            get_components=self.circuit.snapshot,
            is_pressed=lambda component_id: component_id == self.pressed_button_id,
            on_led=self.set_led_state,
            tick_ms=tick_ms,
            scheduler=PygameTimer(),
        )

        # Define UI areas
        self.toolbar_rect = pygame.Rect(0, 0, SCREEN_WIDTH, TOOLBAR_HEIGHT)
        self.palette_rect = pygame.Rect(0, TOOLBAR_HEIGHT, PALETTE_WIDTH, SCREEN_HEIGHT - TOOLBAR_HEIGHT)
        self.canvas_rect = pygame.Rect(PALETTE_WIDTH, TOOLBAR_HEIGHT,
                                       SCREEN_WIDTH - PALETTE_WIDTH, SCREEN_HEIGHT - TOOLBAR_HEIGHT)
        self.properties_rect = pygame.Rect(SCREEN_WIDTH - PROPERTIES_WIDTH, TOOLBAR_HEIGHT,
                                           PROPERTIES_WIDTH, SCREEN_HEIGHT - TOOLBAR_HEIGHT)
        self.code_rect = pygame.Rect(PALETTE_WIDTH, SCREEN_HEIGHT - CODE_PANEL_HEIGHT,
                                     SCREEN_WIDTH - PALETTE_WIDTH, CODE_PANEL_HEIGHT)

        self.buttons: Dict[str, Button] = {}
        x = 10
        for id, text, color in (("start", "Start", GREEN), ("stop", "Stop", RED),
                                ("toggle_code", "Code", BLUE), ("save_code", "Save .ino", DARK_GRAY)):
            self.buttons[id] = Button(pygame.Rect(x, 8, 110, TOOLBAR_HEIGHT - 16), text, id, color)
            if id == "start":
                continue  # Stop shares Start's slot
            x += 120
        self.buttons["stop"].visible = False

        # Palette item rects for click detection
        self.palette_item_rects: List[Tuple[pygame.Rect, Dict[str, Any]]] = []
        y_offset = TOOLBAR_HEIGHT + 50
        for item in PALETTE_ITEMS:
            rect = pygame.Rect(PALETTE_PADDING, y_offset, PALETTE_WIDTH - 2 * PALETTE_PADDING, PALETTE_ITEM_HEIGHT)
            self.palette_item_rects.append((rect, item))
            y_offset += PALETTE_ITEM_HEIGHT + PALETTE_PADDING

    # --- Collaborator callbacks ---

    def set_led_state(self, component_id: str, is_on: bool):
        component = self.circuit.get_component_by_id(component_id)
        if component is not None:
            component.lit = is_on

    def show_notice(self, message: str):
        self.notice = MessageBox(message)
        self.status_message = message

    def refresh_code(self):
        self.code_text = self.code_generator.generate_code(self.circuit)

    # --- Actions ---

    def start_simulation(self):
        self.engine.start()
        self.buttons["start"].visible = False
        self.buttons["stop"].visible = True
        self.status_message = "Simulation running. Hold the push button to light the LED."

    def stop_simulation(self):
        self.engine.stop()
        self.pressed_button_id = None
        self.buttons["start"].visible = True
        self.buttons["stop"].visible = False
        self.status_message = "Simulation stopped."

    def place_component(self, component_type: str, pos: Tuple[int, int]) -> Optional[Component]:
        """Drop a palette item onto the canvas at a screen position."""
        canvas_pos = (pos[0] - self.canvas_rect.left, pos[1] - self.canvas_rect.top)
        result = self.circuit.add_component(component_type, canvas_pos)
        if not result:
            self.show_notice(result.rejection.message)
            return None
        component = result.component
        # Component rects live in screen space
        component.rect.move_ip(self.canvas_rect.left, self.canvas_rect.top)
        self.selected_component = component
        self.refresh_code()
        return component

    def confirm_remove(self, component: Component):
        self.notice = MessageBox("Remove this component?", title=DISPLAY_NAMES[component.type],
                                 on_confirm=lambda: self.remove_component(component))

    def remove_component(self, component: Component):
        result = self.circuit.remove_component(component.id)
        if not result:
            self.show_notice(result.rejection.message)
            return
        if self.selected_component is component:
            self.selected_component = None
        if self.pressed_button_id == component.id:
            self.pressed_button_id = None
        self.refresh_code()
        self.status_message = f"Removed {DISPLAY_NAMES[component.type]}."

    def select_pin(self, pin: int):
        """Reassign the selected LED/button to another pin."""
        component = self.selected_component
        if component is None:
            return
        result = self.circuit.reassign_pin(component.id, pin)
        if not result:
            self.show_notice(result.rejection.message)
            return
        self.refresh_code()
        self.status_message = f"{DISPLAY_NAMES[component.type]} now on D{component.pin}."

    def handle_action(self, action: str):
        logging.info(f"Executing action: {action}")
        if action == "start":
            self.start_simulation()
        elif action == "stop":
            self.stop_simulation()
        elif action == "toggle_code":
            self.show_code = not self.show_code
        elif action == "save_code":
            if self.code_generator.save_code(self.code_text, SKETCH_PATH):
                self.status_message = f"Code saved to {SKETCH_PATH}."
            else:
                self.show_notice(f"Error saving code to {SKETCH_PATH}.")

    # --- Properties panel ---

    def pin_options(self) -> List[int]:
        """Free pins plus the selected component's own pin."""
        component = self.selected_component
        if component is None or component.type not in (TYPE_LED, TYPE_BUTTON):
            return []
        registry = self.circuit.registry
        return [pin for pin in range(PIN_MIN, PIN_MAX + 1)
                if registry.is_pin_available(pin) or pin == component.pin]

    def pin_row_rects(self) -> List[Tuple[pygame.Rect, int]]:
        rows = []
        y = self.properties_rect.top + 70
        for pin in self.pin_options():
            rows.append((pygame.Rect(self.properties_rect.left + 10, y, PROPERTIES_WIDTH - 20, PIN_ROW_HEIGHT - 4), pin))
            y += PIN_ROW_HEIGHT
        return rows

    def properties_visible(self) -> bool:
        return bool(self.pin_options())

    # --- Main loop ---

    def run(self):
        """Main application loop."""
        while self.running:
            self.handle_events()
            self.draw()
            self.clock.tick(FPS)

        self.engine.stop()
        pygame.quit()
        sys.exit()

    def handle_events(self):
        """Process Pygame events (quit, timer, mouse, keyboard)."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == SIM_TICK_EVENT:
            self.engine.step()
        elif event.type == pygame.MOUSEBUTTONDOWN:
            self.handle_mouse_down(event.pos, event.button)
        elif event.type == pygame.MOUSEBUTTONUP:
            self.handle_mouse_up(event.pos, event.button)
        elif event.type == pygame.MOUSEMOTION:
            self.handle_mouse_motion(event.pos, event.buttons)
        elif event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_DELETE, pygame.K_BACKSPACE) and self.selected_component:
                self.remove_component(self.selected_component)
            elif event.key == pygame.K_ESCAPE:
                self.dragging_type = None
                self.notice = None

    def handle_mouse_down(self, pos: Tuple[int, int], button: int):
        """Handle mouse button down events."""
        if self.notice is not None:
            notice, self.notice = self.notice, None
            if button == 1:
                notice.click(pos)
            return

        # The code panel covers the canvas while it is shown
        if self.show_code and self.code_rect.collidepoint(pos):
            return

        if button == 3:
            component = self.circuit.get_component_at_position(pos)
            if component:
                self.confirm_remove(component)
            return
        if button != 1:
            return

        for toolbar_button in self.buttons.values():
            if toolbar_button.hit(pos):
                self.handle_action(toolbar_button.id)
                return

        if self.properties_visible() and self.properties_rect.collidepoint(pos):
            for rect, pin in self.pin_row_rects():
                if rect.collidepoint(pos):
                    self.select_pin(pin)
                    break
            return

        if self.palette_rect.collidepoint(pos):
            for rect, item_info in self.palette_item_rects:
                if rect.collidepoint(pos):
                    self.dragging_type = item_info["type"]
                    self.drag_pos = pos
                    self.selected_component = None
                    break
            return

        if self.canvas_rect.collidepoint(pos):
            component = self.circuit.get_component_at_position(pos)
            if component is None:
                self.selected_component = None
                return
            self.selected_component = component
            if component.type == TYPE_BUTTON and self.engine.running:
                self.pressed_button_id = component.id
                return
            self.dragging_component = component
            self.drag_offset = (pos[0] - component.rect.left, pos[1] - component.rect.top)

    def handle_mouse_up(self, pos: Tuple[int, int], button: int):
        """Handle mouse button up events."""
        if button != 1:
            return
        self.pressed_button_id = None

        if self.dragging_type is not None:
            if self.canvas_rect.collidepoint(pos):
                self.place_component(self.dragging_type, pos)
            else:
                logging.info("Component dropped outside canvas.")
            self.dragging_type = None
            self.drag_pos = None

        elif self.dragging_component is not None:
            comp = self.dragging_component
            # Snap to grid, kept inside the canvas
            final_x = max(self.canvas_rect.left, round(comp.rect.left / GRID_SIZE) * GRID_SIZE)
            final_y = max(self.canvas_rect.top, round(comp.rect.top / GRID_SIZE) * GRID_SIZE)
            comp.move_to((final_x, final_y))
            self.dragging_component = None
            self.drag_offset = (0, 0)

    def handle_mouse_motion(self, pos: Tuple[int, int], buttons: Tuple[int, int, int]):
        """Handle mouse movement."""
        if not buttons[0]:
            return
        if self.dragging_type is not None:
            self.drag_pos = pos
        elif self.dragging_component is not None:
            self.dragging_component.move_to((pos[0] - self.drag_offset[0], pos[1] - self.drag_offset[1]))

    # --- Drawing ---

    def draw(self):
        """Draw all UI elements."""
        self.screen.fill(WHITE)
        self.draw_grid()
        self.draw_palette()

        pressed = (self.pressed_button_id,) if self.pressed_button_id else ()
        self.circuit.draw(self.screen, self.small_font, pressed_ids=pressed)

        if self.selected_component and self.selected_component in self.circuit.components:
            highlight_rect = self.selected_component.rect.inflate(6, 6)
            pygame.draw.rect(self.screen, YELLOW, highlight_rect, 2, border_radius=3)

        if self.dragging_type is not None and self.drag_pos is not None:
            preview = Component("preview", self.dragging_type)
            preview.rect.center = self.drag_pos
            preview.draw(self.screen, self.small_font)

        if self.properties_visible():
            self.draw_properties()
        if self.show_code:
            self.draw_code_panel()
        self.draw_toolbar()
        if self.notice is not None:
            self.notice.draw(self.screen, self.font, self.small_font)

        pygame.display.flip()

    def draw_grid(self):
        """Draws a grid on the canvas area."""
        for x in range(self.canvas_rect.left, SCREEN_WIDTH, GRID_SIZE):
            pygame.draw.line(self.screen, GRID_COLOR, (x, self.canvas_rect.top), (x, SCREEN_HEIGHT))
        for y in range(self.canvas_rect.top, SCREEN_HEIGHT, GRID_SIZE):
            pygame.draw.line(self.screen, GRID_COLOR, (self.canvas_rect.left, y), (SCREEN_WIDTH, y))

    def draw_toolbar(self):
        pygame.draw.rect(self.screen, DARK_GRAY, self.toolbar_rect)
        for toolbar_button in self.buttons.values():
            toolbar_button.draw(self.screen, self.font)
        draw_text(self.screen, self.status_message, (510, 16), self.small_font, WHITE)

        # Simulation indicator
        indicator_color = RED if self.engine.running else GRAY
        pygame.draw.circle(self.screen, indicator_color, (SCREEN_WIDTH - 20, TOOLBAR_HEIGHT // 2), 8)

    def draw_palette(self):
        """Draws the component palette."""
        pygame.draw.rect(self.screen, PALETTE_BG, self.palette_rect)
        draw_text(self.screen, "Components", (PALETTE_PADDING, TOOLBAR_HEIGHT + 12), self.font)

        for rect, item_info in self.palette_item_rects:
            pygame.draw.rect(self.screen, WHITE, rect)
            pygame.draw.rect(self.screen, GRAY, rect, 1)
            preview_rect = pygame.Rect(rect.left + 5, rect.centery - 15, 30, 30)
            pygame.draw.rect(self.screen, item_info["color"], preview_rect)
            draw_text(self.screen, item_info["label"], (preview_rect.right + 10, rect.centery - 8), self.font)

    def draw_properties(self):
        component = self.selected_component
        pygame.draw.rect(self.screen, PALETTE_BG, self.properties_rect)
        pygame.draw.line(self.screen, GRAY, self.properties_rect.topleft, self.properties_rect.bottomleft)
        draw_text(self.screen, DISPLAY_NAMES[component.type], (self.properties_rect.left + 10, self.properties_rect.top + 12), self.font)
        draw_text(self.screen, "Pin:", (self.properties_rect.left + 10, self.properties_rect.top + 45), self.small_font, DARK_GRAY)
        for rect, pin in self.pin_row_rects():
            selected = pin == component.pin
            pygame.draw.rect(self.screen, BLUE if selected else WHITE, rect)
            pygame.draw.rect(self.screen, GRAY, rect, 1)
            draw_text(self.screen, f"D{pin}", (rect.left + 8, rect.top + 5), self.small_font, WHITE if selected else BLACK)

    def draw_code_panel(self):
        pygame.draw.rect(self.screen, (30, 30, 30), self.code_rect)
        y = self.code_rect.top + 8
        for line in self.code_text.split("\n"):
            if y > self.code_rect.bottom - 16:
                break
            draw_text(self.screen, line, (self.code_rect.left + 10, y), self.code_font, (220, 220, 220))
            y += 16
