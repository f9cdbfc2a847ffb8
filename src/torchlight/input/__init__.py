"""
Input abstraction layer.

Exposes:
- InputAction: Logical intents (move, add light, quit, fullscreen).
- InputEvent: A press/release event for a logical action.
- InputMapper: Rebindable mapping from physical keys to actions.
"""
from .actions import InputAction, InputEvent, movement_delta
from .mapping import InputMapper

__all__ = [
    "InputAction",
    "InputEvent",
    "InputMapper",
    "movement_delta",
]
