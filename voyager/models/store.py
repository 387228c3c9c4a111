"""
Plan store - Holds the current trip and hands every change to persistence.
"""
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from .plan import TravelPlan

logger = logging.getLogger(__name__)


class NoPlanLoadedError(LookupError):
    """Raised when an operation needs a plan but none is loaded."""


class PersistencePort(Protocol):
    """Receives the whole document after each successful change."""

    def save(self, document: dict) -> None:
        ...


class InMemoryPersistence:
    """Keeps the last saved document in memory."""

    def __init__(self, document: Optional[str] = None):
        self.document = document
        self.save_count = 0

    def save(self, document: dict):
        self.document = json.dumps(document)
        self.save_count += 1

    def load(self) -> Optional[str]:
        return self.document


class JsonFilePersistence:
    """Stores the document as a JSON file; each save overwrites the file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, document: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")


class PlanStore:
    """
    Owns the current plan.

    Transformations are pure functions of the plan; the store applies
    them, keeps the result and saves the new document when it changed.
    """

    def __init__(self, persistence: Optional[PersistencePort] = None):
        self.persistence = persistence
        self._plan: Optional[TravelPlan] = None
        self.last_saved: Optional[datetime] = None

    @property
    def plan(self) -> Optional[TravelPlan]:
        return self._plan

    def require_plan(self) -> TravelPlan:
        """Get the current plan or raise NoPlanLoadedError."""
        if self._plan is None:
            raise NoPlanLoadedError("No plan loaded")
        return self._plan

    def replace(self, plan: TravelPlan) -> TravelPlan:
        """Make a plan current (new trip or import) and save it."""
        self._plan = plan
        self._save()
        return plan

    def apply(self, transform: Callable[..., TravelPlan], *args, **kwargs) -> TravelPlan:
        """
        Run a transformation on the current plan.

        Args:
            transform: Pure function taking the plan first and returning a plan
            *args, **kwargs: Extra arguments for the transformation

        Returns:
            The (possibly unchanged) current plan
        """
        current = self.require_plan()
        updated = transform(current, *args, **kwargs)
        if updated == current:
            return current
        self._plan = updated
        self._save()
        return updated

    def load(self) -> Optional[TravelPlan]:
        """
        Load the saved plan from persistence.

        A missing or unreadable document leaves the store without a plan.
        """
        from ..services.transfer import PlanImportError, import_plan

        loader = getattr(self.persistence, "load", None)
        if loader is None:
            return None
        try:
            raw = loader()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read saved plan: {e}")
            return None
        if not raw:
            return None

        try:
            self._plan = import_plan(raw)
        except PlanImportError as e:
            logger.error(f"Failed to load saved plan: {e}")
            self._plan = None
            return None

        self.last_saved = datetime.now()
        logger.info(f"Loaded plan {self._plan.id} for {self._plan.destination}")
        return self._plan

    def import_document(self, text: Union[str, bytes]) -> TravelPlan:
        """Replace the current plan with an imported one; failures keep the current plan."""
        from ..services.transfer import PlanImportError, import_plan

        try:
            plan = import_plan(text)
        except PlanImportError as e:
            logger.error(f"Import rejected: {e}")
            raise
        return self.replace(plan)

    def _save(self):
        if self.persistence is None or self._plan is None:
            return
        self.persistence.save(self._plan.to_document())
        self.last_saved = datetime.now()
