"""In-memory exercise catalog."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..config import DEFAULT_EXERCISE_LIBRARY
from ..exceptions import ExerciseLibraryError
from ..models.exercise import ExerciseDefinition
from ..models.muscles import Equipment, ExerciseCategory, MuscleGroup

logger = logging.getLogger(__name__)


class ExerciseLibrary:
    """
    Exercise catalog backed by a list of definitions.

    Implements ``ExerciseLibraryQuerying``. Lookups preserve catalog order.
    """

    def __init__(self, exercises: Iterable[ExerciseDefinition]):
        self._exercises: List[ExerciseDefinition] = []
        self._by_id: Dict[str, ExerciseDefinition] = {}
        for exercise in exercises:
            if exercise.id in self._by_id:
                logger.debug(f"Duplicate exercise id '{exercise.id}' ignored")
                continue
            self._by_id[exercise.id] = exercise
            self._exercises.append(exercise)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ExerciseLibrary":
        """
        Load a catalog from a JSON array of exercise objects.

        Raises:
            ExerciseLibraryError: If the file is missing or malformed
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ExerciseLibraryError("Exercise catalog not found", path=str(path)) from e
        except (OSError, json.JSONDecodeError) as e:
            raise ExerciseLibraryError(f"Exercise catalog unreadable: {e}", path=str(path)) from e

        if not isinstance(raw, list):
            raise ExerciseLibraryError("Exercise catalog must be a JSON array", path=str(path))

        try:
            exercises = [ExerciseDefinition.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise ExerciseLibraryError(f"Invalid exercise entry: {e}", path=str(path)) from e

        logger.debug(f"Loaded {len(exercises)} exercises from {path}")
        return cls(exercises)

    @classmethod
    def default(cls) -> "ExerciseLibrary":
        """Load the catalog bundled with the package."""
        return cls.from_json(DEFAULT_EXERCISE_LIBRARY)

    def __len__(self) -> int:
        return len(self._exercises)

    def all_exercises(self) -> Sequence[ExerciseDefinition]:
        return tuple(self._exercises)

    def by_id(self, exercise_id: str) -> Optional[ExerciseDefinition]:
        return self._by_id.get(exercise_id)

    def search(self, query: str) -> List[ExerciseDefinition]:
        """Case-insensitive substring match on name and localized name."""
        needle = query.strip().casefold()
        if not needle:
            return list(self._exercises)
        return [
            e for e in self._exercises
            if needle in e.name.casefold()
            or (e.localized_name is not None and needle in e.localized_name.casefold())
        ]

    def for_muscle(self, muscle: MuscleGroup) -> List[ExerciseDefinition]:
        return [
            e for e in self._exercises
            if muscle in e.primary_muscles or muscle in e.secondary_muscles
        ]

    def for_category(self, category: ExerciseCategory) -> List[ExerciseDefinition]:
        return [e for e in self._exercises if e.category == category]

    def for_equipment(self, equipment: Equipment) -> List[ExerciseDefinition]:
        return [e for e in self._exercises if e.equipment == equipment]
