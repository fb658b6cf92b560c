"""YAML policy loader.

Product policy (upload limits, review rules, asset URLs, auth redirects)
lives in ``config/config.yaml`` and is checked in.  Deployment values
(ports, paths, secrets) belong to :class:`Settings` and never appear in
the returned dict.
"""

from pathlib import Path

import yaml

from stickerpacks.config.settings import Settings
from stickerpacks.utils.errors import ConfigurationError


def load_config(path: str | None = None, settings: Settings | None = None) -> dict:
    """Read the policy file.

    Args:
        path: YAML file to read.  Defaults to ``settings.config_path``.
        settings: Pre-built settings; a fresh ``Settings()`` when omitted.

    Returns:
        The parsed policy sections.  A missing or empty file yields ``{}``
        and every consumer falls back to its built-in defaults.
    """
    if path is None:
        path = (settings or Settings()).config_path
    config_path = Path(path)
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return config
