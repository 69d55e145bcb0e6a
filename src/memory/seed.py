"""
FAQ seed file loading.

The seed file is a JSON array of {"question": ..., "response": ...}
objects. Identifiers and vectors are generated at seeding time.
"""

import json
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from src.errors import SeedDataError
from src.memory.models import FaqEntry


_entries_adapter = TypeAdapter(List[FaqEntry])


def load_faq_entries(path: Path) -> List[FaqEntry]:
    """
    Load and validate the FAQ seed file.

    Args:
        path: Path to the JSON seed file

    Returns:
        List[FaqEntry]: Entries in file order

    Raises:
        SeedDataError: If the file is missing, is not valid JSON, or does
            not contain a list of question/response objects
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SeedDataError(f"Cannot read FAQ seed file '{path}': {e}", component="seed") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SeedDataError(f"FAQ seed file '{path}' is not valid JSON: {e}", component="seed") from e

    try:
        return _entries_adapter.validate_python(data)
    except ValidationError as e:
        raise SeedDataError(f"FAQ seed file '{path}' is malformed: {e}", component="seed") from e
