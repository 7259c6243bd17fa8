"""Load parser and supplier configurations from JSON files."""
import json
from pathlib import Path
from typing import Any, Type, TypeVar, Union

import structlog
from pydantic import ValidationError

from supplier_rules.errors import ConfigurationError
from supplier_rules.models.base import ConfigModel
from supplier_rules.models.parser_config import ParserConfig
from supplier_rules.models.supplier_config import SuppliersConfiguration

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=ConfigModel)


def _read_json(path: Union[str, Path]) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")
    try:
        with file_path.open("r", encoding="utf-8-sig") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {file_path.name}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {file_path}: {e}") from e


def _validate(model: Type[ModelT], data: Any, source: str) -> ModelT:
    if data is None:
        data = {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e


def load_parser_config(path: Union[str, Path]) -> ParserConfig:
    """Load a single parser configuration and resolve its own lookups.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON or does
            not describe a parser configuration
    """
    config = _validate(ParserConfig, _read_json(path), str(path))
    config.merge_lookups()
    logger.info(
        "parser_config_loaded",
        path=str(path),
        columns=list(config.column_rules.keys()),
    )
    return config


def load_suppliers_configuration(path: Union[str, Path]) -> SuppliersConfiguration:
    """Load the suppliers document and merge global lookups into every parser.

    Raises:
        ConfigurationError: If the file is unreadable or structurally invalid
    """
    config = _validate(SuppliersConfiguration, _read_json(path), str(path))

    errors = config.validate_configuration()
    if errors:
        raise ConfigurationError(
            f"Invalid configuration in {path}: " + "; ".join(errors)
        )

    config.merge_all_lookups()
    logger.info(
        "suppliers_configuration_loaded",
        path=str(path),
        version=config.version,
        suppliers=[supplier.name for supplier in config.suppliers],
    )
    return config
