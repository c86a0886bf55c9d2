# pin_registry.py
# Tracks which placed component owns each digital pin (D2-D13) of the board.

import logging
from typing import Dict, List, Union

from config import PIN_MIN, PIN_MAX

# --- Pin Ownership ---
class Free:
    """Ownership value of a pin nobody has claimed."""

    def __eq__(self, other):
        return isinstance(other, Free)

    def __hash__(self):
        return hash(Free)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Free()"


class OwnedBy:
    """Ownership value of a pin claimed by one component."""

    def __init__(self, component_id: str):
        self.component_id = component_id

    def __eq__(self, other):
        return isinstance(other, OwnedBy) and other.component_id == self.component_id

    def __hash__(self):
        return hash((OwnedBy, self.component_id))

    def __repr__(self):
        return f"OwnedBy('{self.component_id}')"


FREE = Free()
Ownership = Union[Free, OwnedBy]


def is_valid_pin(pin) -> bool:
    """Checks if pin number is within the addressable range (2-13)."""
    return isinstance(pin, int) and not isinstance(pin, bool) and PIN_MIN <= pin <= PIN_MAX


class PinRegistry:
    """
    Single source of truth for pin ownership.

    Purely strict state tracking: no automatic reassignment and no conflict
    resolution. Callers check availability before they assign.
    """

    def __init__(self):
        self._pins: Dict[int, Ownership] = {pin: FREE for pin in range(PIN_MIN, PIN_MAX + 1)}

    def __repr__(self):
        return f"PinRegistry(used={self.get_used_pins()})"

    def is_valid_pin(self, pin) -> bool:
        return is_valid_pin(pin)

    def is_pin_available(self, pin) -> bool:
        """True iff the pin is in range and currently unowned."""
        if not is_valid_pin(pin):
            return False
        return self._pins[pin] == FREE

    def assign_pin(self, component_id: str, pin) -> bool:
        """
        Assigns a pin to a component.

        Returns:
            True if ownership was recorded. False (and no change) if the pin
            is out of range or already owned.
        """
        if not self.is_pin_available(pin):
            logging.debug(f"Pin D{pin} not assignable to '{component_id}' (owner: {self.owner_of(pin)}).")
            return False
        self._pins[pin] = OwnedBy(component_id)
        return True

    def release_pin(self, pin):
        """Releases a pin. Releasing a free or out-of-range pin is a no-op."""
        if is_valid_pin(pin):
            self._pins[pin] = FREE

    def release_component_pins(self, component_id: str):
        """Releases every pin owned by the given component."""
        for pin, owner in self._pins.items():
            if owner == OwnedBy(component_id):
                self._pins[pin] = FREE

    def get_used_pins(self) -> List[int]:
        """Returns all owned pins in ascending order."""
        return [pin for pin in sorted(self._pins) if self._pins[pin] != FREE]

    def available_pins(self) -> List[int]:
        return [pin for pin in sorted(self._pins) if self._pins[pin] == FREE]

    def owner_of(self, pin) -> Ownership:
        """Ownership of a pin; out-of-range pins read as Free."""
        if not is_valid_pin(pin):
            return FREE
        return self._pins[pin]

    def pins_of(self, component_id: str) -> List[int]:
        target = OwnedBy(component_id)
        return [pin for pin in sorted(self._pins) if self._pins[pin] == target]
