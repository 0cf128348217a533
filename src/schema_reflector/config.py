"""Environment-driven defaults for Reflector options (read once, after load_dotenv)."""

from typing import Dict
from dotenv import load_dotenv
import os

# Load environment variables
load_dotenv()

ALLOW_ADDITIONAL_PROPERTIES_ENV = 'SCHEMA_REFLECTOR_ALLOW_ADDITIONAL_PROPERTIES'
REQUIRED_FROM_TAGS_ENV = 'SCHEMA_REFLECTOR_REQUIRED_FROM_TAGS'
EXPANDED_TOP_LEVEL_ENV = 'SCHEMA_REFLECTOR_EXPANDED_TOP_LEVEL'

TRUTHY_VALUES = frozenset(['1', 'true', 'yes', 'on'])


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY_VALUES


def reflector_settings() -> Dict[str, bool]:
    """Reflector keyword arguments taken from the environment."""
    return {
        'allow_additional_properties': env_flag(ALLOW_ADDITIONAL_PROPERTIES_ENV),
        'required_from_tags': env_flag(REQUIRED_FROM_TAGS_ENV),
        'expanded_top_level': env_flag(EXPANDED_TOP_LEVEL_ENV),
    }
