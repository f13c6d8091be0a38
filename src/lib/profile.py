"""
Typing profile loader.

A profile is a named YAML file of engine settings, so a host can keep
"dramatic", "chatty" or "terminal" pacing presets next to its content:

    # profiles/dramatic.yaml
    typing:
      total_time: 4.5
      noise: 0.6
    caret:
      show: true
      char: "_"
      blink_rate: 0.4
      keep: false
    export:
      pygments_style: native

Every key is optional; missing ones fall back to the application settings.
"""

from pathlib import Path
from typing import Any, Dict, Optional, TYPE_CHECKING

import yaml

from ..models.engine import EngineConfig

if TYPE_CHECKING:
    from ..config.settings import AppSettings


class ProfileError(Exception):
    """Raised when profile loading or validation fails"""
    pass


class TypingProfile:
    """
    Represents a typing profile loaded from <profiles_dir>/<name>.yaml
    """

    def __init__(self, profile_name: str, profiles_dir: str = "profiles"):
        """
        Load a profile by name.

        Args:
            profile_name: Profile file stem (e.g., "dramatic")
            profiles_dir: Directory containing profile files

        Raises:
            ProfileError: If the profile file doesn't exist or can't be parsed
        """
        self.name = profile_name
        self.profiles_dir = Path(profiles_dir)
        self.config_path = self.profiles_dir / f"{profile_name}.yaml"

        if not self.config_path.exists():
            raise ProfileError(
                f"Profile '{profile_name}' not found. "
                f"Expected file: {self.config_path}"
            )

        self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse the profile YAML"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProfileError(f"Failed to parse {self.config_path.name}: {e}")
        except OSError as e:
            raise ProfileError(f"Failed to load {self.config_path.name}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ProfileError(f"Profile '{self.name}' must be a mapping")
        return config

    def config_get(self, key: str, default: Any = None) -> Any:
        """
        Get a value from the profile.

        Supports nested keys with dot notation:
          profile.config_get('caret.blink_rate', 0.5)

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key doesn't exist

        Returns:
            Configuration value or default
        """
        value: Any = self.config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def engineConfig_build(
        self, settings: Optional["AppSettings"] = None, **overrides: Any
    ) -> EngineConfig:
        """
        Build an EngineConfig from this profile layered over settings.

        Args:
            settings: AppSettings providing fallbacks and clamps
            **overrides: Values that win over the profile (None is ignored)

        Raises:
            ProfileError: If a profile value has the wrong type
        """
        profile_values = {
            "totalTypingTime": self.config_get('typing.total_time'),
            "noiseVariation": self.config_get('typing.noise'),
            "showCaret": self.config_get('caret.show'),
            "caretChar": self.config_get('caret.char'),
            "caretBlinkRate": self.config_get('caret.blink_rate'),
            "keepCaretAfterTyping": self.config_get('caret.keep'),
        }

        for field_name in ("totalTypingTime", "noiseVariation", "caretBlinkRate"):
            value = profile_values[field_name]
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise ProfileError(f"Profile '{self.name}': {field_name} must be a number, got {value!r}")
        if profile_values["caretChar"] is not None:
            profile_values["caretChar"] = str(profile_values["caretChar"])

        merged = {k: v for k, v in profile_values.items() if v is not None}
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return EngineConfig.config_createFromSettings(settings, **merged)

    def pygmentsStyle_get(self) -> str:
        """
        Get Pygments style name for the HTML frame log.

        Returns:
            Pygments style name (default: 'monokai')
        """
        return self.config_get('export.pygments_style', 'monokai')

    def __repr__(self) -> str:
        return f"TypingProfile(name='{self.name}', path='{self.config_path}')"


def profiles_listAvailable(profiles_dir: str = "profiles") -> list[str]:
    """
    List all available profile names.

    Args:
        profiles_dir: Path to profiles directory

    Returns:
        Sorted profile names (stems of *.yaml files)
    """
    profiles_path: Path = Path(profiles_dir)

    if not profiles_path.exists():
        return []

    return sorted(item.stem for item in profiles_path.glob("*.yaml") if item.is_file())
