"""
Core utilities with no dependency on the field tree.
"""

from .uid import UIDGenerator
from .transformers import Transformer, TransformerFactory, default_transformers
from .message_queue import MessageQueue
from .text_utils import humanize, move
from .performance_monitor import timer, timed

__all__ = [
    "UIDGenerator",
    "Transformer",
    "TransformerFactory",
    "default_transformers",
    "MessageQueue",
    "humanize",
    "move",
    "timer",
    "timed",
]
