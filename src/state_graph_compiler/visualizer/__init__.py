"""
Visualizer Module

This module provides terminal visualization of compiled state machine documents.

Available visualizers:
- GraphVisualizer: For visualizing compiled ASL documents as ASCII trees
"""

from .base import Colors, Icons
from .graph_visualizer import GraphVisualizer

__all__ = [
    "GraphVisualizer",
    "Colors",
    "Icons",
]
