"""
Lifecycle hook names and the event objects handed to listeners.
"""

from .event import Event, Operation
from .hooks import Hook, HookFamily, hook_name, hooks_in

__all__ = ["Event", "Hook", "HookFamily", "Operation", "hook_name", "hooks_in"]
