"""
Configuration modules for planet generation.
"""

from .config import Settings, settings
from .presets import PLANET_PRESETS, get_preset, list_presets

__all__ = ['Settings', 'settings', 'PLANET_PRESETS', 'get_preset', 'list_presets']
