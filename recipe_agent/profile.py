"""User nutrition profile used for personalization."""

from enum import Enum

from pydantic import BaseModel, Field


class FitnessGoal(str, Enum):
    """Fitness goal a user has chosen."""

    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    HEALTH = "health"


class UserProfile(BaseModel):
    """Nutrition and fitness data of the requesting user.

    Every field is optional; personalization degrades gracefully.
    """

    username: str | None = Field(default=None, description="Display name")
    subscription_type: str | None = Field(
        default=None,
        description="Subscription tier, e.g. 'free' or 'premium'",
    )
    fitness_goal: FitnessGoal | None = Field(default=None, description="Fitness goal")
    daily_calories: float | None = Field(default=None, description="Daily kcal target")
    daily_proteins: float | None = Field(default=None, description="Daily protein (g)")
    daily_carbs: float | None = Field(default=None, description="Daily carbs (g)")
    daily_fats: float | None = Field(default=None, description="Daily fats (g)")
    weight: float | None = Field(default=None, description="Weight (kg)")
    height: float | None = Field(default=None, description="Height (cm)")
    age: int | None = Field(default=None, description="Age (years)")
    activity_level: str | None = Field(default=None, description="Activity level")
    biological_gender: str | None = Field(default=None, description="Biological gender")

    @property
    def is_premium(self) -> bool:
        return self.subscription_type == "premium"
