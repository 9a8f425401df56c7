"""
Image Preprocessing Module

Monocular debayering, colour conversion and rectification.
"""

from .mono_processor import MonoProcessor, MonoFlags

__all__ = ['MonoProcessor', 'MonoFlags']
