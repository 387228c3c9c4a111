"""
Plan transfer - JSON export and import of the trip document.
"""
import json
import logging
import re
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from ..models.plan import TravelPlan

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "voyager_plan_"
_WHITESPACE = re.compile(r"\s+")


class PlanImportError(ValueError):
    """Raised when an imported document cannot be turned into a plan."""


def export_plan(plan: TravelPlan) -> str:
    """Serialize the full plan to indented JSON."""
    return json.dumps(plan.to_document(), indent=2, ensure_ascii=False)


def export_filename(plan: TravelPlan) -> str:
    """File name for an export, e.g. 'voyager_plan_New_York.json'."""
    slug = _WHITESPACE.sub("_", plan.destination)
    return f"{EXPORT_PREFIX}{slug}.json"


def write_export(plan: TravelPlan, directory: Union[str, Path]) -> Path:
    """Write the export file into a directory and return its path."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(plan)
    path.write_text(export_plan(plan), encoding="utf-8")
    logger.info(f"Exported plan {plan.id} to {path}")
    return path


def import_plan(text: Union[str, bytes]) -> TravelPlan:
    """
    Parse an exported document.

    Raises:
        PlanImportError: If the text is not JSON, does not match the
            document shape, or its days do not cover the date range
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise PlanImportError(f"Plan is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PlanImportError("Plan document must be a JSON object")

    try:
        return TravelPlan.model_validate(data)
    except ValidationError as e:
        raise PlanImportError(f"Plan document is invalid: {e.error_count()} error(s)\n{e}") from e
