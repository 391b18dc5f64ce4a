"""Loading of canned API documents from ``tests/fixtures/__files``.

The layout mirrors the API: ``api/v3/groups/byGroupId`` is the document
returned for ``GET /api/v3/groups/:id``. A *variant* selects an alternative
document stored next to the default one with a ``_<variant>`` suffix.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

FILES_DIR = Path(__file__).parent / "fixtures" / "__files"


def fixture_path(relative_path: str, variant: Optional[str] = None) -> Path:
    """Return the path of a fixture document.

    Raises:
        FileNotFoundError: If the document does not exist.
    """
    if variant:
        relative_path = f"{relative_path}_{variant}"
    path = FILES_DIR / f"{relative_path}.json"
    if not path.is_file():
        raise FileNotFoundError(f"The file {path} doesn't exist in test fixtures")
    return path


def load_json_array_from_file(relative_path: str, variant: Optional[str] = None) -> list[Any]:
    """Load a JSON array fixture."""
    data = json.loads(fixture_path(relative_path, variant).read_text(encoding="utf-8"))
    assert isinstance(data, list), f"{relative_path} is not a JSON array"
    return data


def load_json_object_from_file(
    relative_path: str,
    index: Optional[int] = None,
    variant: Optional[str] = None,
) -> dict[str, Any]:
    """Load a JSON object fixture.

    With *index*, the fixture is a JSON array and the object at that
    position is returned.
    """
    if index is not None:
        return load_json_array_from_file(relative_path, variant)[index]
    data = json.loads(fixture_path(relative_path, variant).read_text(encoding="utf-8"))
    assert isinstance(data, dict), f"{relative_path} is not a JSON object"
    return data
