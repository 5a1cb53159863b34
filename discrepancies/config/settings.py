"""
Persisted user settings.

The settings file is a small JSON document holding the last used paths and
the exclusion rule set:

    {
      "lastZipPath": "...",
      "lastWorkDir": "...",
      "lastOutputDir": "...",
      "excludeRules": [{"pattern": "bin", "type": "glob", "isDir": true, ...}]
    }

SettingsManager is an explicit object; callers pass its rule set into the
comparison rather than reading any process-wide state.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from discrepancies.errors import ConfigError
from discrepancies.models import AppSettings, ExclusionRule

from .defaults import default_exclusion_rules

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".discrepancies"
CONFIG_FILE_NAME = "config.json"


def default_config_path() -> Path:
    """Return ``~/.discrepancies/config.json``."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class SettingsManager:
    """Loads, mutates and saves AppSettings.

    Every mutating method saves immediately. A missing settings file, or one
    with an empty rule list, is populated with the built-in rules.

    Attributes:
        config_path: Location of the JSON settings file.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """Load settings from ``config_path`` (defaults to the user's home directory).

        Raises:
            ConfigError: If the file exists but cannot be parsed, or cannot be written.
        """
        self.config_path = Path(config_path) if config_path is not None else default_config_path()
        self._settings = AppSettings()

        existed = self.config_path.exists()
        self.load()

        if not existed or not self._settings.exclusion_rules:
            self._settings.exclusion_rules = default_exclusion_rules()
            self.save()

    def load(self) -> AppSettings:
        """Read the settings file. A missing file leaves the defaults in place."""
        if not self.config_path.exists():
            return self.get()

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(
                f"Failed to read settings file {self.config_path}: {e}", path=str(self.config_path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Settings file {self.config_path} does not contain a JSON object",
                path=str(self.config_path),
            )

        self._settings = AppSettings(
            last_archive_path=str(data.get("lastZipPath", "")),
            last_working_dir=str(data.get("lastWorkDir", "")),
            last_output_dir=str(data.get("lastOutputDir", "")),
            exclusion_rules=[
                ExclusionRule.from_dict(entry)
                for entry in data.get("excludeRules") or []
                if isinstance(entry, dict)
            ],
        )
        logger.debug(f"Loaded settings from {self.config_path}")
        return self.get()

    def save(self) -> None:
        """Write the current settings to disk, creating the parent directory."""
        data = {
            "lastZipPath": self._settings.last_archive_path,
            "lastWorkDir": self._settings.last_working_dir,
            "lastOutputDir": self._settings.last_output_dir,
            "excludeRules": [rule.to_dict() for rule in self._settings.exclusion_rules],
        }
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise ConfigError(
                f"Failed to write settings file {self.config_path}: {e}", path=str(self.config_path)
            ) from e

    def get(self) -> AppSettings:
        """Return a copy of the current settings."""
        return replace(self._settings, exclusion_rules=list(self._settings.exclusion_rules))

    def set(self, settings: AppSettings) -> None:
        """Replace all settings and save."""
        self._settings = replace(settings, exclusion_rules=list(settings.exclusion_rules))
        self.save()

    def set_last_archive_path(self, path: Union[str, Path]) -> None:
        self._settings.last_archive_path = str(path)
        self.save()

    def set_last_working_dir(self, path: Union[str, Path]) -> None:
        self._settings.last_working_dir = str(path)
        self.save()

    def set_last_output_dir(self, path: Union[str, Path]) -> None:
        self._settings.last_output_dir = str(path)
        self.save()

    def get_default_output_dir(self) -> Path:
        """Return the last output directory, or ``~/Documents/Discrepancies_Output``."""
        if self._settings.last_output_dir:
            return Path(self._settings.last_output_dir)
        return Path.home() / "Documents" / "Discrepancies_Output"

    def get_exclusion_rules(self) -> List[ExclusionRule]:
        """Return the configured rules, or the built-in rules when none are configured."""
        if not self._settings.exclusion_rules:
            return default_exclusion_rules()
        return list(self._settings.exclusion_rules)

    def set_exclusion_rules(self, rules: List[ExclusionRule]) -> None:
        self._settings.exclusion_rules = list(rules)
        self.save()

    def add_exclusion_rule(self, rule: ExclusionRule) -> None:
        self._settings.exclusion_rules.append(rule)
        self.save()

    def remove_exclusion_rule(self, index: int) -> bool:
        """Remove the rule at ``index``.

        Returns:
            False (and nothing is saved) when the index is out of range.
        """
        if index < 0 or index >= len(self._settings.exclusion_rules):
            return False
        del self._settings.exclusion_rules[index]
        self.save()
        return True

    def reset_exclusion_rules(self) -> None:
        """Restore the built-in rule set."""
        self._settings.exclusion_rules = default_exclusion_rules()
        self.save()
