# circuit.py
# Placed components, the placement policy that guards the pin registry,
# and the read-only views handed to the simulation engine.

import logging
from typing import List, Dict, Tuple, Optional, NamedTuple
import pygame

from config import LED_DEFAULT_PIN, BUTTON_DEFAULT_PIN, LED_ON_COLOR, LED_OFF_COLOR
from pin_registry import PinRegistry, is_valid_pin

# --- Constants ---
TYPE_BOARD = "board"
TYPE_LED = "led"
TYPE_BUTTON = "button"

# Alternate spellings accepted for the catalog types
TYPE_ALIASES = {
    "arduino-uno": TYPE_BOARD,
    "arduinouno": TYPE_BOARD,
    "arduino": TYPE_BOARD,
    "push-button": TYPE_BUTTON,
    "pushbutton": TYPE_BUTTON,
}

# Per-type rules: how many may exist at once and which pin a new one takes.
# A default pin of None means the type is not wired to a digital line.
PLACEMENT_RULES: Dict[str, Dict[str, Optional[int]]] = {
    TYPE_BOARD: {"capacity": 1, "default_pin": None},
    TYPE_LED: {"capacity": 1, "default_pin": LED_DEFAULT_PIN},
    TYPE_BUTTON: {"capacity": 1, "default_pin": BUTTON_DEFAULT_PIN},
}

DISPLAY_NAMES = {
    TYPE_BOARD: "Arduino Uno",
    TYPE_LED: "LED",
    TYPE_BUTTON: "Push Button",
}

# Rejection codes
DUPLICATE_COMPONENT = "duplicate_component"
DEFAULT_PIN_OCCUPIED = "default_pin_occupied"
PIN_OCCUPIED = "pin_occupied"
INVALID_PIN = "invalid_pin"
UNKNOWN_COMPONENT = "unknown_component"
UNKNOWN_TYPE = "unknown_type"
NOT_ASSIGNABLE = "not_assignable"


def normalize_type(component_type: str) -> str:
    """Lower-case a type tag and map palette aliases onto the catalog names."""
    tag = str(component_type).strip().lower()
    return TYPE_ALIASES.get(tag, tag)


class PolicyRejection:
    """Why a placement, removal or pin change was refused. State is left unchanged."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def __repr__(self):
        return f"PolicyRejection(code='{self.code}', message='{self.message}')"


class PlacementResult:
    """Outcome of a placement-layer operation. Truthy on success."""

    def __init__(self, component: Optional['Component'] = None,
                 rejection: Optional[PolicyRejection] = None):
        self.component = component
        self.rejection = rejection

    @property
    def ok(self) -> bool:
        return self.rejection is None

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f"PlacementResult(ok, {self.component!r})"
        return f"PlacementResult({self.rejection!r})"


def _reject(code: str, message: str) -> PlacementResult:
    logging.warning(f"Placement rejected [{code}]: {message}")
    return PlacementResult(rejection=PolicyRejection(code, message))


class ComponentView(NamedTuple):
    """Immutable per-tick view of a placed component."""
    id: str
    type: str
    pin: Optional[int]


class Component:
    """Represents a single component placed on the canvas."""

    def __init__(self, id: str, type: str, position: Tuple[int, int] = (0, 0),
                 pin: Optional[int] = None):
        """
        Initializes a Component.

        Args:
            id: Unique identifier, issued by the Circuit.
            type: One of 'board', 'led', 'button'.
            position: The (x, y) top-left position on the canvas.
            pin: The digital pin this component is wired to, if any.
        """
        self.id = id
        self.type = normalize_type(type)
        self.pin = pin
        self.width, self.height = self._get_default_size()
        self.rect = pygame.Rect(position[0], position[1], self.width, self.height)
        self.color = self._get_default_color()
        self.lit = False  # LED glow, driven by the simulation

    @property
    def position(self) -> Tuple[int, int]:
        return self.rect.topleft

    def _get_default_size(self) -> Tuple[int, int]:
        """Get default size based on component type."""
        sizes = {
            TYPE_BOARD: (300, 220),
            TYPE_LED: (30, 60),  # Includes legs
            TYPE_BUTTON: (50, 50),
        }
        return sizes.get(self.type, (40, 40))

    def _get_default_color(self) -> Tuple[int, int, int]:
        colors = {
            TYPE_BOARD: (0, 120, 120),
            TYPE_LED: LED_OFF_COLOR,
            TYPE_BUTTON: (100, 100, 100),
        }
        return colors.get(self.type, (150, 150, 150))

    def __repr__(self):
        return f"Component(id='{self.id}', type='{self.type}', pin={self.pin})"

    def view(self) -> ComponentView:
        return ComponentView(self.id, self.type, self.pin)

    def move_to(self, position: Tuple[int, int]):
        """Move the component to a new position."""
        self.rect.topleft = position

    def contains_point(self, point: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(point)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, pressed: bool = False):
        """Draw the component on the given surface."""
        if self.type == TYPE_LED:
            body = pygame.Rect(self.rect.left, self.rect.top, self.width, self.width)
            if self.lit:
                # Glow halo
                pygame.draw.circle(surface, (255, 150, 150), body.center, self.width)
            color = LED_ON_COLOR if self.lit else LED_OFF_COLOR
            pygame.draw.ellipse(surface, color, body)
            pygame.draw.ellipse(surface, (0, 0, 0), body, 1)
            # Legs
            pygame.draw.line(surface, (120, 120, 120), (body.left + 9, body.bottom), (body.left + 9, self.rect.bottom), 2)
            pygame.draw.line(surface, (120, 120, 120), (body.right - 9, body.bottom), (body.right - 9, self.rect.bottom - 6), 2)
        elif self.type == TYPE_BUTTON:
            pygame.draw.rect(surface, self.color, self.rect, border_radius=4)
            cap_color = (60, 60, 60) if pressed else (170, 20, 20)
            pygame.draw.circle(surface, cap_color, self.rect.center, self.width // 3)
            pygame.draw.rect(surface, (0, 0, 0), self.rect, 1, border_radius=4)
        else:
            pygame.draw.rect(surface, self.color, self.rect, border_radius=6)
            pygame.draw.rect(surface, (0, 0, 0), self.rect, 1, border_radius=6)

        label_text = DISPLAY_NAMES.get(self.type, self.type.upper())
        if self.pin is not None:
            label_text += f" (D{self.pin})"
        label = font.render(label_text, True, (0, 0, 0))
        if self.type == TYPE_BOARD:
            label_rect = label.get_rect(center=self.rect.center)
        else:
            label_rect = label.get_rect(midtop=(self.rect.centerx, self.rect.bottom + 4))
        surface.blit(label, label_rect)


class Circuit:
    """
    The placement layer: owns the placed components and funnels every pin
    change through the PinRegistry.
    """

    def __init__(self, registry: Optional[PinRegistry] = None):
        self.registry = registry if registry is not None else PinRegistry()
        self.components: List[Component] = []
        self._next_id = 0

    def _new_id(self, component_type: str) -> str:
        component_id = f"{component_type}_{self._next_id}"
        self._next_id += 1
        return component_id

    def get_components(self) -> List[Component]:
        """Placed components in placement order. Callers must not mutate the list."""
        return self.components

    def snapshot(self) -> Tuple[ComponentView, ...]:
        """Read-only view of the component set for one simulation tick."""
        return tuple(component.view() for component in self.components)

    def find_by_type(self, component_type: str) -> Optional[Component]:
        component_type = normalize_type(component_type)
        return next((c for c in self.components if c.type == component_type), None)

    def get_component_by_id(self, component_id: str) -> Optional[Component]:
        return next((c for c in self.components if c.id == component_id), None)

    def get_component_at_position(self, position: Tuple[int, int]) -> Optional[Component]:
        """Find the component at the given position."""
        # Last added is drawn on top
        for component in reversed(self.components):
            if component.contains_point(position):
                return component
        return None

    def get_component_count(self) -> Dict[str, int]:
        """Return a count of each component type in the circuit."""
        counts: Dict[str, int] = {}
        for component in self.components:
            counts[component.type] = counts.get(component.type, 0) + 1
        return counts

    def can_add(self, component_type: str) -> Optional[PolicyRejection]:
        """Check the placement rules for a new component. None means it may be added."""
        component_type = normalize_type(component_type)
        rule = PLACEMENT_RULES.get(component_type)
        name = DISPLAY_NAMES.get(component_type, component_type)
        if rule is None:
            return PolicyRejection(UNKNOWN_TYPE, f"Unknown component type '{component_type}'.")

        if self.get_component_count().get(component_type, 0) >= rule["capacity"]:
            return PolicyRejection(DUPLICATE_COMPONENT, f"Only one {name} is allowed.")

        default_pin = rule["default_pin"]
        if default_pin is not None and not self.registry.is_pin_available(default_pin):
            return PolicyRejection(DEFAULT_PIN_OCCUPIED,
                                   f"Cannot add {name}: Default Pin D{default_pin} is occupied.")
        return None

    def add_component(self, component_type: str, position: Tuple[int, int] = (0, 0)) -> PlacementResult:
        """
        Place a new component, centred on `position` and clamped to the canvas origin.

        The per-type capacity and default-pin rules are checked before anything
        is created, so a rejection leaves the circuit and registry untouched.
        """
        component_type = normalize_type(component_type)
        rejection = self.can_add(component_type)
        if rejection is not None:
            logging.warning(f"Placement rejected [{rejection.code}]: {rejection.message}")
            return PlacementResult(rejection=rejection)

        component_id = self._new_id(component_type)
        default_pin = PLACEMENT_RULES[component_type]["default_pin"]
        if default_pin is not None:
            # can_add() saw it free
            self.registry.assign_pin(component_id, default_pin)

        component = Component(id=component_id, type=component_type, pin=default_pin)
        component.move_to((max(0, position[0] - component.width // 2),
                           max(0, position[1] - component.height // 2)))
        self.components.append(component)
        logging.info(f"Added {component!r} at {component.position}")
        return PlacementResult(component=component)

    def remove_component(self, component_id: str) -> PlacementResult:
        """Release every pin the component owns, then discard it."""
        component = self.get_component_by_id(component_id)
        if component is None:
            return _reject(UNKNOWN_COMPONENT, f"No component with id '{component_id}'.")

        self.registry.release_component_pins(component_id)
        component.pin = None
        self.components.remove(component)
        logging.info(f"Removed {component!r}")
        return PlacementResult(component=component)

    def reassign_pin(self, component_id: str, new_pin: int) -> PlacementResult:
        """
        Move a component to another pin.

        The new pin is claimed first; the old one is released only once that
        succeeds. On any failure the component and registry are unchanged.
        """
        component = self.get_component_by_id(component_id)
        if component is None:
            return _reject(UNKNOWN_COMPONENT, f"No component with id '{component_id}'.")
        if PLACEMENT_RULES[component.type]["default_pin"] is None:
            return _reject(NOT_ASSIGNABLE, f"{DISPLAY_NAMES[component.type]} has no pin to assign.")
        if not is_valid_pin(new_pin):
            return _reject(INVALID_PIN, f"Pin {new_pin} is not a digital pin (D2-D13).")

        old_pin = component.pin
        if new_pin == old_pin:
            return PlacementResult(component=component)

        if not self.registry.assign_pin(component.id, new_pin):
            return _reject(PIN_OCCUPIED, f"Pin assignment failed. D{new_pin} is occupied.")

        if old_pin is not None:
            self.registry.release_pin(old_pin)
        component.pin = new_pin
        logging.info(f"Reassigned '{component.id}' from D{old_pin} to D{new_pin}")
        return PlacementResult(component=component)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, pressed_ids=()):
        """Draw all components, board first so parts sit on top of it."""
        for component in sorted(self.components, key=lambda c: c.type != TYPE_BOARD):
            component.draw(surface, font, pressed=component.id in pressed_ids)
