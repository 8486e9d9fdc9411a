from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class Exercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, alias="exerciseName", description="The name of the exercise.")
    sets: int = Field(..., ge=1, description="The number of sets for the exercise.")
    reps: str = Field(..., description="Repetitions per set, e.g. 8-12.")
    rest_time: str = Field(..., alias="restTime", description="Rest between sets, e.g. 60 seconds.")
    completed: int = Field(0, ge=0, description="Number of sets completed so far.")

    @field_validator("completed", mode="before")
    @classmethod
    def _legacy_flag(cls, v, info: ValidationInfo):
        # Older documents stored a boolean "done" flag instead of a set count
        if isinstance(v, bool):
            return info.data.get("sets", 0) if v else 0
        return v

    @model_validator(mode="after")
    def _completed_within_sets(self) -> "Exercise":
        if self.completed > self.sets:
            raise ValueError(f"completed ({self.completed}) cannot exceed sets ({self.sets})")
        return self


class ExerciseRoutine(BaseModel):
    routine: List[Exercise] = Field(default_factory=list)
    notes: Optional[str] = None

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DatedRoutine(BaseModel):
    date: str
    routine: ExerciseRoutine


class ExerciseHistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_name: str = Field(..., alias="exerciseName")
    sets: int
    reps: str
    days_ago: str = Field(..., alias="daysAgo")
