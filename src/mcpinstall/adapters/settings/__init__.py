"""Settings store adapters."""

from .mapping_store import MappingSettingsStore
from .yaml_store import YamlSettingsStore

__all__ = ["MappingSettingsStore", "YamlSettingsStore"]
