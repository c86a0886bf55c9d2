# -*- coding: utf-8 -*-
"""
code_generator.py

Generates the Arduino (.ino) sketch that matches the circuit on the canvas.
The sketch is the same rule the simulator evaluates each tick.
"""

import logging
from typing import List, Optional

from circuit import Circuit, Component, TYPE_BOARD, TYPE_LED, TYPE_BUTTON

# --- Constants ---
PIN_MODES = {
    "OUTPUT": "OUTPUT",
    "INPUT_PULLUP": "INPUT_PULLUP"
}
HEADER = [
    "// Arduino Simulator - Push Button controls LED",
    "// ----------------------------------------",
    "",
]


def _pin_literal(component: Component) -> str:
    return str(component.pin) if component.pin is not None else "-1"


def _find(components: List[Component], component_type: str) -> Optional[Component]:
    return next((c for c in components if c.type == component_type), None)


def generate_arduino_code(circuit: Circuit) -> str:
    """
    Generates the Arduino sketch for the current circuit.

    Args:
        circuit: The placement layer holding the board, LED and button.

    Returns:
        The sketch source. Without a board only a notice comment is produced.
    """
    components = circuit.get_components()
    board = _find(components, TYPE_BOARD)
    led = _find(components, TYPE_LED)
    button = _find(components, TYPE_BUTTON)

    lines: List[str] = list(HEADER)
    if board is None:
        lines.append("// No Arduino Uno detected.")
        return "\n".join(lines) + "\n"

    if led:
        lines.append(f"const int ledPin = {_pin_literal(led)};")
    if button:
        lines.append(f"const int buttonPin = {_pin_literal(button)};")

    lines.append("")
    lines.append("void setup() {")
    if led:
        lines.append(f"  pinMode(ledPin, {PIN_MODES['OUTPUT']});")
    if button:
        # Button to GND, internal pull-up keeps the line HIGH while released
        lines.append(f"  pinMode(buttonPin, {PIN_MODES['INPUT_PULLUP']});")
    lines.append("}")
    lines.append("")

    lines.append("void loop() {")
    if led and button:
        lines.append("  int buttonState = digitalRead(buttonPin);")
        lines.append("  digitalWrite(ledPin, buttonState == LOW ? HIGH : LOW);")
    else:
        lines.append("  // Add both LED and Button to see logic.")
    lines.append("}")

    logging.debug(f"Generated sketch for {len(components)} components")
    return "\n".join(lines) + "\n"


class CodeGenerator:
    """Thin wrapper used by the UI: generate, cache and save the sketch."""

    def __init__(self):
        self.last_code = ""

    def generate_code(self, circuit: Circuit) -> str:
        self.last_code = generate_arduino_code(circuit)
        return self.last_code

    def save_code(self, code: str, filename: str = "arduino_sketch.ino") -> bool:
        """
        Saves the sketch to a file.

        Returns:
            True on success, False if the file could not be written.
        """
        if not filename.endswith(".ino"):
            filename += ".ino"
        try:
            with open(filename, "w", encoding="utf-8") as f:
                f.write(code)
            logging.info(f"Arduino code saved to {filename}")
            return True
        except OSError as e:
            logging.error(f"Error saving code to {filename}: {e}", exc_info=True)
            return False
