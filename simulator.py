# -*- coding: utf-8 -*-
"""
simulator.py

Logic-level simulation of the Arduino Uno's digital lines (D0-D13).

Every tick runs three phases over an immutable snapshot of the lines:

    1. sample_inputs   - button pressed -> LOW, released -> HIGH (pull-up)
    2. evaluate_logic  - digitalWrite(ledPin, buttonState == LOW ? HIGH : LOW)
    3. render_outputs  - LED is ON iff its line is HIGH

Each phase returns a new tuple, so nothing read within a tick can be
overwritten by a later write in the same tick.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

import pygame

from config import LINE_COUNT, SIM_TICK_MS
from circuit import ComponentView, TYPE_BUTTON, TYPE_LED
from pin_registry import is_valid_pin

# --- Constants ---
LOW = 0
HIGH = 1

STATE_STOPPED = "stopped"
STATE_RUNNING = "running"

# Posted by pygame.time.set_timer once per tick
SIM_TICK_EVENT = pygame.USEREVENT + 1

Lines = Tuple[int, ...]


def initial_lines() -> Lines:
    """All lines HIGH, the INPUT_PULLUP idle state."""
    return (HIGH,) * LINE_COUNT


def _write(lines: Lines, pin: int, value: int) -> Lines:
    updated = list(lines)
    updated[pin] = value
    return tuple(updated)


def _wired(component: Optional[ComponentView]) -> bool:
    return component is not None and is_valid_pin(component.pin)


def _first_of(components: Iterable[ComponentView], component_type: str) -> Optional[ComponentView]:
    return next((c for c in components if c.type == component_type), None)


# --- Tick Phases ---

def sample_inputs(lines: Lines, button: Optional[ComponentView], pressed: bool) -> Lines:
    """Phase 1: the button is wired to GND, so pressed reads LOW and released reads HIGH."""
    if not _wired(button):
        return lines
    return _write(lines, button.pin, LOW if pressed else HIGH)


def evaluate_logic(lines: Lines, button: Optional[ComponentView], led: Optional[ComponentView]) -> Lines:
    """
    Phase 2: the sketch's loop() body.

    With both parts wired the LED line is the negation of the button line.
    Otherwise no logic runs and the LED line, if it has one, is driven LOW.
    """
    if _wired(button) and _wired(led):
        button_state = lines[button.pin]  # digitalRead
        return _write(lines, led.pin, HIGH if button_state == LOW else LOW)
    if _wired(led):
        return _write(lines, led.pin, LOW)
    return lines


def render_outputs(lines: Lines, led: Optional[ComponentView]) -> Optional[bool]:
    """Phase 3: LED is active HIGH. None when there is no wired LED to report on."""
    if not _wired(led):
        return None
    return lines[led.pin] == HIGH


# --- Scheduling ---

class PygameTimer:
    """Fires SIM_TICK_EVENT on the pygame event queue at a fixed period."""

    def __init__(self, event_type: int = SIM_TICK_EVENT):
        self.event_type = event_type
        self.active = False

    def schedule(self, period_ms: int):
        pygame.time.set_timer(self.event_type, period_ms)
        self.active = True

    def cancel(self):
        # A period of 0 disables the timer; harmless if none is set
        pygame.time.set_timer(self.event_type, 0)
        self.active = False


class SimulationEngine:
    """
    Runs the three-phase tick loop against the placement layer's components.

    Args:
        get_components: returns the current read-only component views.
        is_pressed: environment input, is this button physically held right now.
        on_led: rendering collaborator, receives (component_id, is_on).
        tick_ms: fixed tick period for the whole run.
        scheduler: object with schedule(period_ms)/cancel(); None for manual stepping.
    """

    def __init__(self, get_components: Callable[[], Sequence[ComponentView]],
                 is_pressed: Callable[[str], bool] = lambda component_id: False,
                 on_led: Callable[[str, bool], None] = lambda component_id, is_on: None,
                 tick_ms: int = SIM_TICK_MS,
                 scheduler=None):
        if tick_ms <= 0:
            raise ValueError(f"tick_ms must be positive, got {tick_ms}")
        self.get_components = get_components
        self.is_pressed = is_pressed
        self.on_led = on_led
        self.tick_ms = tick_ms
        self.scheduler = scheduler
        self.state = STATE_STOPPED
        self.tick_count = 0
        self.led_states: Dict[str, bool] = {}
        self._lines = initial_lines()

    @property
    def running(self) -> bool:
        return self.state == STATE_RUNNING

    @property
    def lines(self) -> Lines:
        return self._lines

    @property
    def frame_rate(self) -> float:
        return 1000.0 / self.tick_ms

    def start(self):
        if self.running:
            return
        self._lines = initial_lines()
        self.tick_count = 0
        self.state = STATE_RUNNING
        if self.scheduler is not None:
            self.scheduler.schedule(self.tick_ms)
        logging.info(f"Simulator: Started ({self.frame_rate:.0f} Hz)")

    def stop(self):
        if not self.running:
            return
        if self.scheduler is not None:
            self.scheduler.cancel()
        self.state = STATE_STOPPED
        self.reset()
        logging.info(f"Simulator: Stopped after {self.tick_count} ticks")

    def reset(self):
        """Turn every LED off and pull all lines back HIGH."""
        current = [c.id for c in self.get_components() if c.type == TYPE_LED]
        # LEDs removed since their last report are switched off too, then forgotten
        for component_id in dict.fromkeys(list(self.led_states) + current):
            self._report(component_id, False)
        self.led_states = {component_id: False for component_id in current}
        self._lines = initial_lines()

    def step(self) -> Optional[bool]:
        """
        Run one tick. Returns the LED state reported this tick, or None when
        stopped or when no wired LED exists.
        """
        if not self.running:
            return None

        components = tuple(self.get_components())
        button = _first_of(components, TYPE_BUTTON)
        led = _first_of(components, TYPE_LED)

        pressed = bool(self.is_pressed(button.id)) if _wired(button) else False
        sampled = sample_inputs(self._lines, button, pressed)
        driven = evaluate_logic(sampled, button, led)
        led_on = render_outputs(driven, led)

        self._lines = driven
        self.tick_count += 1
        if led_on is not None:
            self._report(led.id, led_on)
        return led_on

    def _report(self, component_id: str, is_on: bool):
        self.led_states[component_id] = is_on
        self.on_led(component_id, is_on)
