"""Configuration package for Discrepancies.

- default_exclusion_rules: The built-in exclusion rule set.
- SettingsManager: JSON-backed persistence of last used paths and rules.
"""

from .defaults import default_exclusion_rules
from .settings import SettingsManager, default_config_path

__all__ = ["SettingsManager", "default_config_path", "default_exclusion_rules"]
