"""
Utility Functions and Helpers

Common utilities for the stereo processing pipeline.
"""

from .config_manager import ConfigManager

__all__ = ['ConfigManager']
