"""
PyQt6 event-loop integration.
"""

from .message_pump import QtMessagePump

__all__ = ["QtMessagePump"]
