"""Context loader for reading parse contexts from YAML/JSON files."""

import json
from pathlib import Path

from pydantic import ValidationError

from trailparse.parser.exceptions import ContextFileError
from trailparse.parser.intent_types import ParseContext
from trailparse.schemas.context_snapshot import ContextSnapshot


def load_context_from_file(file_path: Path) -> ParseContext:
    """Load a parse context from a YAML or JSON file.

    Args:
        file_path: Path to YAML or JSON file.

    Returns:
        ParseContext built from the file.

    Raises:
        ContextFileError: If the file is missing, cannot be parsed, or
            does not match the context schema.
    """
    if not file_path.exists():
        raise ContextFileError(f"Context file not found: {file_path}", path=str(file_path))

    suffix = file_path.suffix.lower()
    try:
        with open(file_path, encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                import yaml

                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ContextFileError(
                    f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json",
                    path=str(file_path),
                )
    except ContextFileError:
        raise
    except Exception as e:
        raise ContextFileError(f"Failed to parse {file_path}: {e}", path=str(file_path)) from e

    try:
        snapshot = ContextSnapshot.model_validate(data or {})
    except ValidationError as e:
        raise ContextFileError(f"Invalid context file: {e}", path=str(file_path)) from e

    return snapshot.to_context()
