"""Utility functions for JSON document I/O."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import PersistenceError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('pickfl.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        PersistenceError: If the file is unreadable, malformed or fails validation

    Example:
        from pickfl.schemas import WeekInformation
        week = load_json('data/weeks/week_1.json', schema=WeekInformation)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise PersistenceError(f'Invalid JSON in {path}: {e.msg}') from e
    except OSError as e:
        logger.error(f'Failed to read {path}: {e}')
        raise PersistenceError(f'Failed to read {path}: {e}') from e

    if schema:
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise PersistenceError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Save data as JSON file.

    The document is written to a sibling temp file first and moved into
    place, so readers never see a half-written file.

    Args:
        path: Path to write to (str or Path object)
        data: Data to serialize (must be JSON-serializable or Pydantic model)
        indent: Indentation level (default: 2 spaces)
        create_dirs: Create parent directories if they don't exist (default: True)

    Raises:
        PersistenceError: If data is not serializable or the file cannot be written
    """
    path = Path(path)

    logger.debug(f'Saving JSON to: {path}')

    json_data = data.model_dump() if isinstance(data, BaseModel) else data

    tmp_path = path.with_name(path.name + '.tmp')
    try:
        if create_dirs:
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
        tmp_path.replace(path)
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise PersistenceError(f'Data is not JSON-serializable: {e}') from e
    except OSError as e:
        logger.error(f'Failed to write file {path}: {e}')
        raise PersistenceError(f'Failed to write file {path}: {e}') from e
    finally:
        tmp_path.unlink(missing_ok=True)


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()
