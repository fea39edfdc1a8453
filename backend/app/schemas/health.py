"""Pydantic schemas for the health analysis API (camelCase on the wire)."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "veryActive"


class BmiCategory(str, Enum):
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


class SleepStatus(str, Enum):
    INSUFFICIENT = "Insufficient"
    OPTIMAL = "Optimal"
    EXCESSIVE = "Excessive"


class HydrationStatus(str, Enum):
    INSUFFICIENT = "Insufficient"
    OPTIMAL = "Optimal"


class BiometricRecord(BaseModel):
    """
    Self-reported inputs for one analysis.
    gender and activity_level stay free strings: the calculators fall back to
    female / sedentary for values outside Gender / ActivityLevel.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    age: int
    height: float = Field(..., description="Centimeters")
    weight: float = Field(..., description="Kilograms")
    gender: str
    activity_level: str = Field(..., alias="activityLevel")
    sleep_hours: float = Field(..., alias="sleepHours")
    water_intake: float = Field(..., alias="waterIntake", description="Liters per day")
    symptoms: str | None = None


class BmiResult(BaseModel):
    value: float
    category: BmiCategory
    recommendation: str


class BmrResult(BaseModel):
    value: int
    explanation: str


class CalorieNeeds(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    maintenance: int
    weight_loss: int = Field(alias="weightLoss")
    weight_gain: int = Field(alias="weightGain")
    recommendation: str


class SleepAnalysis(BaseModel):
    current: float
    recommended: str
    status: SleepStatus
    tips: list[str]


class HydrationAnalysis(BaseModel):
    current: float
    recommended: int
    status: HydrationStatus
    tips: list[str]


class GeneralHealth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    recommendations: list[str]
    reported_symptoms: str = Field(alias="reportedSymptoms")


class MetricsResult(BaseModel):
    """Full analysis returned by POST /analyze."""

    model_config = ConfigDict(populate_by_name=True)

    bmi: BmiResult
    bmr: BmrResult
    calorie_needs: CalorieNeeds = Field(alias="calorieNeeds")
    sleep_analysis: SleepAnalysis = Field(alias="sleepAnalysis")
    hydration_analysis: HydrationAnalysis = Field(alias="hydrationAnalysis")
    general_health: GeneralHealth = Field(alias="generalHealth")


class ErrorResponse(BaseModel):
    error: str


class HealthCheckResponse(BaseModel):
    status: str
