from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .profile import ActivityLevel, Gender
from .routine import Exercise, ExerciseRoutine


class GenerateRoutineInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fitness_goal: str = Field(..., min_length=1, alias="fitnessGoal")
    available_time: float = Field(..., gt=0, alias="availableTime", description="Minutes available")
    age: int = Field(..., gt=0)
    gender: Gender
    activity_level: ActivityLevel = Field(..., alias="activityLevel")
    user_id: str = Field(..., alias="userId")


class GenerateRoutineOutput(BaseModel):
    routine: List[Exercise] = Field(..., min_length=1, description="The generated exercise routine.")
    notes: Optional[str] = Field(None, description="Any notes or recommendations for the user.")

    def to_routine(self) -> ExerciseRoutine:
        # A freshly generated routine has nothing completed yet
        exercises = [ex.model_copy(update={"completed": 0}) for ex in self.routine]
        return ExerciseRoutine(routine=exercises, notes=self.notes)
