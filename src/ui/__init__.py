"""
User interface components for the Blueprint Flooring Estimator
"""

from .estimator_window import EstimatorWindow
from .chat_panel import ChatPanel
from .projects_panel import ProjectsPanel

__all__ = ['EstimatorWindow', 'ChatPanel', 'ProjectsPanel']
