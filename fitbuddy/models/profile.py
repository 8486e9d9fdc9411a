from __future__ import annotations

from datetime import date
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


Gender = Literal["male", "female", "other"]

ActivityLevel = Literal[
    "sedentary",
    "lightlyActive",
    "moderatelyActive",
    "veryActive",
    "extraActive",
]

ExerciseGoal = Literal[
    "weight_loss",
    "muscle_gain",
    "general_fitness",
    "strength_training",
    "endurance",
]

AgeRelatedCondition = Literal["menopause", "pregnancy", "postpartum"]


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_of_birth: date = Field(..., alias="dob")
    weight_kg: float = Field(..., gt=0, alias="weightKg")
    height_cm: float = Field(..., gt=0, alias="heightCm")
    gender: Gender
    activity_level: ActivityLevel = Field(..., alias="activityLevel")
    exercise_goal: ExerciseGoal = Field(..., alias="exerciseGoal")
    age_related_conditions: List[AgeRelatedCondition] = Field(
        default_factory=list,
        alias="ageRelatedConditions",
        description="Only meaningful when gender is female",
    )

    @field_validator("age_related_conditions")
    @classmethod
    def _as_set(cls, v: List[AgeRelatedCondition]) -> List[AgeRelatedCondition]:
        return sorted(set(v))

    @model_validator(mode="after")
    def _conditions_need_female(self) -> "UserProfile":
        if self.age_related_conditions and self.gender != "female":
            raise ValueError("ageRelatedConditions can only be set when gender is 'female'")
        return self

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
