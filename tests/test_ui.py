"""Headless tests for the pygame front end."""

import pygame
import pytest

from simulator import SIM_TICK_EVENT
from ui import VisualBuilderUI

BOARD_ITEM = (50, 130)
LED_ITEM = (50, 200)
BUTTON_ITEM = (50, 270)


@pytest.fixture
def ui():
    app = VisualBuilderUI(tick_ms=50)
    yield app
    app.engine.stop()
    pygame.quit()


def drag_from_palette(ui, item_pos, drop_pos):
    ui.handle_mouse_down(item_pos, 1)
    ui.handle_mouse_motion(drop_pos, (1, 0, 0))
    ui.handle_mouse_up(drop_pos, 1)


def build_circuit(ui):
    drag_from_palette(ui, BOARD_ITEM, (600, 400))
    drag_from_palette(ui, LED_ITEM, (400, 150))
    drag_from_palette(ui, BUTTON_ITEM, (300, 500))


def test_palette_drop_places_components_with_default_pins(ui):
    build_circuit(ui)

    led = ui.circuit.find_by_type("led")
    button = ui.circuit.find_by_type("button")
    assert ui.circuit.get_component_count() == {"board": 1, "led": 1, "button": 1}
    assert led.pin == 10
    assert button.pin == 2
    assert button.rect.center == (300, 500)
    assert "const int ledPin = 10;" in ui.code_text


def test_drop_outside_canvas_places_nothing(ui):
    drag_from_palette(ui, LED_ITEM, (60, 600))
    assert ui.circuit.get_components() == []
    assert ui.dragging_type is None


def test_duplicate_drop_shows_notice(ui):
    drag_from_palette(ui, LED_ITEM, (400, 150))
    drag_from_palette(ui, LED_ITEM, (700, 300))

    assert len(ui.circuit.get_components()) == 1
    assert ui.notice is not None
    assert "Only one LED" in ui.notice.message

    # Next click only dismisses the notice
    ui.handle_mouse_down((700, 300), 1)
    assert ui.notice is None


def test_pin_list_reassigns_selected_component(ui):
    build_circuit(ui)
    led = ui.circuit.find_by_type("led")
    ui.selected_component = led

    options = ui.pin_options()
    assert 2 not in options
    assert 10 in options

    rect = next(rect for rect, pin in ui.pin_row_rects() if pin == 13)
    ui.handle_mouse_down(rect.center, 1)

    assert led.pin == 13
    assert ui.circuit.registry.is_pin_available(10)
    assert "const int ledPin = 13;" in ui.code_text


def test_reassign_to_occupied_pin_shows_notice(ui):
    build_circuit(ui)
    led = ui.circuit.find_by_type("led")
    ui.selected_component = led

    ui.select_pin(2)

    assert led.pin == 10
    assert ui.notice is not None


def test_holding_button_lights_led(ui):
    build_circuit(ui)
    led = ui.circuit.find_by_type("led")
    button = ui.circuit.find_by_type("button")

    ui.handle_action("start")
    assert ui.engine.running
    assert not ui.buttons["start"].visible

    ui.handle_mouse_down(button.rect.center, 1)
    ui.handle_event(pygame.event.Event(SIM_TICK_EVENT))
    assert led.lit is True

    ui.handle_mouse_up(button.rect.center, 1)
    ui.handle_event(pygame.event.Event(SIM_TICK_EVENT))
    assert led.lit is False

    ui.handle_mouse_down(button.rect.center, 1)
    ui.handle_event(pygame.event.Event(SIM_TICK_EVENT))
    ui.handle_action("stop")
    assert led.lit is False
    assert not ui.engine.running
    assert ui.pressed_button_id is None


def test_right_click_asks_before_removing(ui):
    build_circuit(ui)
    button = ui.circuit.find_by_type("button")

    ui.handle_mouse_down(button.rect.center, 3)

    assert ui.notice is not None
    assert ui.notice.message == "Remove this component?"
    assert ui.circuit.find_by_type("button") is button

    ui.handle_mouse_down(ui.notice.yes_rect.center, 1)

    assert ui.notice is None
    assert ui.circuit.find_by_type("button") is None
    assert ui.circuit.registry.is_pin_available(2)
    assert "buttonPin" not in ui.code_text


@pytest.mark.parametrize("answer", ["no", "outside"])
def test_declined_removal_keeps_component(ui, answer):
    build_circuit(ui)
    button = ui.circuit.find_by_type("button")
    ui.handle_mouse_down(button.rect.center, 3)

    pos = ui.notice.no_rect.center if answer == "no" else (5, 5)
    ui.handle_mouse_down(pos, 1)

    assert ui.notice is None
    assert ui.circuit.find_by_type("button") is button
    assert button.pin == 2


def test_code_panel_blocks_clicks_on_covered_components(ui):
    drag_from_palette(ui, BUTTON_ITEM, (400, 650))
    button = ui.circuit.find_by_type("button")
    ui.selected_component = None
    ui.handle_action("toggle_code")
    assert ui.code_rect.collidepoint(button.rect.center)

    ui.handle_mouse_down(button.rect.center, 1)
    assert ui.selected_component is None
    assert ui.dragging_component is None

    ui.handle_mouse_down(button.rect.center, 3)
    assert ui.notice is None

    ui.handle_action("toggle_code")
    ui.handle_mouse_down(button.rect.center, 1)
    assert ui.selected_component is button


def test_drag_moves_component(ui):
    build_circuit(ui)
    button = ui.circuit.find_by_type("button")

    ui.handle_mouse_down(button.rect.center, 1)
    ui.handle_mouse_motion((320, 660), (1, 0, 0))
    ui.handle_mouse_up((320, 660), 1)

    assert button.rect.left % 20 == 0
    assert button.rect.top % 20 == 0
    assert abs(button.rect.centerx - 320) <= 20
    assert button.pin == 2


def test_draw_does_not_fail(ui):
    build_circuit(ui)
    ui.show_code = True
    ui.selected_component = ui.circuit.find_by_type("led")
    ui.draw()
