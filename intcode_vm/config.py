"""
Intcode VM - Configuration Constants

Module-level defaults for the harnesses and the CLI. Command-line flags
override these; nothing is read from files or the environment.
"""

import logging

# =============================================================================
#  NETWORK
# =============================================================================
NETWORK_SIZE = 50          # Nodes, addressed 0..NETWORK_SIZE-1
MONITOR_ADDRESS = 255      # Idle monitor ("NAT") address
IDLE_VALUE = -1            # Input handed to a node whose mailbox is empty


# =============================================================================
#  AMPLIFIERS
# =============================================================================
CHAIN_PHASES = range(0, 5)      # Serial chain phase settings
FEEDBACK_PHASES = range(5, 10)  # Feedback loop phase settings
INITIAL_SIGNAL = 0


# =============================================================================
#  INTERACTIVE SCREEN
# =============================================================================
SCORE_POSITION = (-1, 0)   # (x, y) that carries a score instead of a tile
FREE_PLAY_PATCH = {0: 2}   # Writing 2 at address 0 enables free play
DISPLAY_FRAME_SECONDS = 0.0


# =============================================================================
#  LOGGING
# =============================================================================
LOGGER_NAME = "intcode_vm"
DEFAULT_LOG_LEVEL = logging.DEBUG
DEFAULT_CONSOLE_LEVEL = logging.WARNING


# =============================================================================
#  RUN PROFILES
#  Named input/patch presets for ``icvm run --profile NAME``.
# =============================================================================
PROFILES = {
    "plain": {
        "description": "No input, no patches",
        "inputs": [],
        "patches": {},
    },
    "diagnostic": {
        "description": "System ID 1 (air conditioner diagnostics)",
        "inputs": [1],
        "patches": {},
    },
    "thermal": {
        "description": "System ID 5 (thermal radiator controller)",
        "inputs": [5],
        "patches": {},
    },
    "boost-test": {
        "description": "BOOST self-test mode",
        "inputs": [1],
        "patches": {},
    },
    "boost": {
        "description": "BOOST sensor boost mode",
        "inputs": [2],
        "patches": {},
    },
    "gravity-assist": {
        "description": "Restore the 1202 program alarm state (noun=12, verb=2)",
        "inputs": [],
        "patches": {1: 12, 2: 2},
    },
}
