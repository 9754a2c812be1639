"""Loading action configuration from YAML or JSON files."""

from pathlib import Path
from typing import Any, Union

import structlog
import yaml

from ..errors import ConfigurationFileError

logger = structlog.get_logger(__name__)


def parse_config(text: str, source: Any = "<string>") -> Any:
    """Parse configuration text.

    JSON documents are accepted as they are valid YAML.

    Args:
        text: YAML or JSON document
        source: Name used in error messages

    Returns:
        The configuration value; an empty document yields an empty mapping

    Raises:
        ConfigurationFileError: If the document is not valid YAML
    """
    try:
        config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationFileError(source, f"invalid YAML: {e}") from e

    if config is None:
        return {}
    return config


def load_config(path: Union[str, Path]) -> Any:
    """Read and parse a configuration file.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        The configuration value

    Raises:
        ConfigurationFileError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationFileError(path, f"cannot read file: {e.strerror or e}") from e

    logger.debug("Loaded configuration file", path=str(path), size=len(text))
    return parse_config(text, source=path)
