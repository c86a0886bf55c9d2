"""Tests for pin ownership tracking."""

import pytest

from pin_registry import PinRegistry, Free, OwnedBy, FREE, is_valid_pin


@pytest.fixture
def registry():
    return PinRegistry()


def test_all_pins_start_free(registry):
    for pin in range(2, 14):
        assert registry.is_pin_available(pin)
        assert registry.owner_of(pin) == FREE
    assert registry.get_used_pins() == []
    assert registry.available_pins() == list(range(2, 14))


@pytest.mark.parametrize("pin", [0, 1, 14, -3, 100, None, "5", 2.0, True])
def test_out_of_range_pins_are_never_available(registry, pin):
    assert not is_valid_pin(pin)
    assert not registry.is_pin_available(pin)
    assert registry.assign_pin("led_1", pin) is False
    assert registry.get_used_pins() == []


def test_assign_records_owner(registry):
    assert registry.assign_pin("led_1", 10) is True
    assert not registry.is_pin_available(10)
    assert registry.owner_of(10) == OwnedBy("led_1")
    assert registry.get_used_pins() == [10]


def test_second_assign_to_owned_pin_fails_and_keeps_owner(registry):
    assert registry.assign_pin("led_1", 7)
    assert registry.assign_pin("button_2", 7) is False
    assert registry.owner_of(7) == OwnedBy("led_1")
    assert registry.pins_of("button_2") == []


def test_reassigning_same_owner_to_own_pin_fails(registry):
    assert registry.assign_pin("led_1", 7)
    assert registry.assign_pin("led_1", 7) is False
    assert registry.pins_of("led_1") == [7]


def test_release_pin_is_idempotent(registry):
    registry.assign_pin("led_1", 4)
    registry.release_pin(4)
    assert registry.is_pin_available(4)
    registry.release_pin(4)
    assert registry.is_pin_available(4)


def test_release_out_of_range_pin_is_noop(registry):
    registry.assign_pin("led_1", 13)
    registry.release_pin(14)
    registry.release_pin(0)
    assert registry.get_used_pins() == [13]


def test_available_again_after_release(registry):
    registry.assign_pin("led_1", 5)
    registry.release_pin(5)
    assert registry.assign_pin("button_2", 5)
    assert registry.owner_of(5) == OwnedBy("button_2")


def test_release_component_pins_only_touches_that_component(registry):
    registry.assign_pin("led_1", 3)
    registry.assign_pin("led_1", 9)
    registry.assign_pin("button_2", 2)

    registry.release_component_pins("led_1")

    assert registry.get_used_pins() == [2]
    assert registry.owner_of(2) == OwnedBy("button_2")


def test_release_component_pins_is_idempotent(registry):
    registry.assign_pin("led_1", 3)
    registry.assign_pin("button_2", 2)

    registry.release_component_pins("led_1")
    once = [registry.owner_of(pin) for pin in range(2, 14)]
    registry.release_component_pins("led_1")
    twice = [registry.owner_of(pin) for pin in range(2, 14)]

    assert once == twice


def test_used_pins_are_ascending(registry):
    for pin, owner in ((13, "a"), (2, "b"), (8, "c")):
        registry.assign_pin(owner, pin)
    assert registry.get_used_pins() == [2, 8, 13]


def test_free_and_owned_are_distinct_even_for_falsy_ids():
    assert OwnedBy("") != FREE
    assert Free() == FREE
    assert not FREE
    assert OwnedBy("") == OwnedBy("")
    assert OwnedBy("a") != OwnedBy("b")


def test_empty_string_component_id_still_owns_pin(registry):
    assert registry.assign_pin("", 6)
    assert not registry.is_pin_available(6)
    registry.release_component_pins("")
    assert registry.is_pin_available(6)
