from .model import FrameworkOption, TemplatePathConfig, Settings, to_mappings
from .load import load_settings, settings_from_dict, guess_framework
from .paths import SETTINGS_FILE, SETTINGS_SECTION

__all__ = [
    "FrameworkOption",
    "TemplatePathConfig",
    "Settings",
    "to_mappings",
    "load_settings",
    "settings_from_dict",
    "guess_framework",
    "SETTINGS_FILE",
    "SETTINGS_SECTION",
]
