# main.py
# Main application entry point for the circuit simulator.

import sys
import logging

import pygame

from config import LOG_FORMAT, SIM_TICK_MS, log_level
from ui import VisualBuilderUI


def main():
    """Configure logging, build the UI and hand control to its event loop."""
    logging.basicConfig(level=log_level(), format=LOG_FORMAT)
    logging.info("Initializing Circuit Simulator...")

    try:
        app = VisualBuilderUI(tick_ms=SIM_TICK_MS)
    except pygame.error as e:
        logging.critical(f"Fatal Error: Pygame initialization failed: {e}", exc_info=True)
        pygame.quit()
        sys.exit(1)

    logging.info("Application initialized successfully.")
    app.run()


# --- Main Execution ---
if __name__ == "__main__":
    main()
