"""
Estimator service route modules.

Each module handles one area of the HTTP surface.
"""

from .analysis import router as analysis_router

__all__ = [
    "analysis_router",
]
