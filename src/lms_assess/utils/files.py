from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from lms_assess.data_models import GradableItem, LearningItem, Submission

SUPPORTED_EXTENSIONS = {".yaml", ".yml", ".json"}


def read_document(path: Path) -> Dict[str, Any]:
    """Parse a YAML or JSON document into a mapping."""
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported document type: {path.suffix}")
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            data = json.load(handle)
        else:
            data = yaml.safe_load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level.")
    return data


def iter_documents(directory: Path) -> Iterable[Path]:
    """Yield all supported document paths within the given directory tree, sorted."""
    found: List[Path] = []
    for ext in SUPPORTED_EXTENSIONS:
        found.extend(directory.rglob(f"*{ext}"))
    yield from sorted(found)


def load_item(path: Path) -> LearningItem:
    """Load a course, class, test or assignment definition."""
    data = read_document(path)
    if data.get("kind") in ("test", "assignment"):
        return GradableItem.model_validate(data)
    return LearningItem.model_validate(data)


def load_items(directory: Path) -> List[LearningItem]:
    """Load every item definition found under a directory."""
    return [load_item(path) for path in iter_documents(directory)]


def load_submission(path: Path) -> Submission:
    return Submission.model_validate(read_document(path))
