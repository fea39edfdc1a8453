"""
Derived health metrics from one BiometricRecord: BMI, BMR (Mifflin-St Jeor),
calorie targets, sleep and hydration status, general recommendations.
Pure functions, no I/O; every input accepted by validate_biometric_record is valid here.
"""
from __future__ import annotations

import logging
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext

from app.schemas.health import (
    ActivityLevel,
    BiometricRecord,
    BmiCategory,
    BmiResult,
    BmrResult,
    CalorieNeeds,
    Gender,
    GeneralHealth,
    HydrationAnalysis,
    HydrationStatus,
    MetricsResult,
    SleepAnalysis,
    SleepStatus,
)

logger = logging.getLogger(__name__)

DECIMAL_PRECISION = 1100

# Upper bounds (exclusive) for each BMI category; anything above is Obese
BMI_THRESHOLDS: tuple[tuple[float, BmiCategory], ...] = (
    (18.5, BmiCategory.UNDERWEIGHT),
    (25.0, BmiCategory.NORMAL),
    (30.0, BmiCategory.OVERWEIGHT),
)

BMI_RECOMMENDATIONS: dict[BmiCategory, str] = {
    BmiCategory.UNDERWEIGHT: "Increase calorie intake with nutrient-rich foods",
    BmiCategory.NORMAL: "Maintain balanced diet and exercise",
    BmiCategory.OVERWEIGHT: "Reduce portion size and increase physical activity",
    BmiCategory.OBESE: "Consult a doctor for a weight management plan",
}

BMR_EXPLANATION = "BMR is the number of calories your body burns at rest"

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY.value: 1.2,
    ActivityLevel.LIGHT.value: 1.375,
    ActivityLevel.MODERATE.value: 1.55,
    ActivityLevel.ACTIVE.value: 1.725,
    ActivityLevel.VERY_ACTIVE.value: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS[ActivityLevel.SEDENTARY.value]

CALORIE_ADJUSTMENT = 500  # kcal/day below/above maintenance
CALORIE_RECOMMENDATION = (
    "Maintenance keeps your current weight; a 500 kcal daily deficit or surplus "
    "changes weight by roughly 0.5 kg per week"
)

SLEEP_RANGE_HOURS = (7, 9)
SLEEP_TIPS: dict[SleepStatus, list[str]] = {
    SleepStatus.INSUFFICIENT: [
        "Go to bed and wake up at the same time every day",
        "Avoid screens for an hour before bed",
        "Limit caffeine after midday",
    ],
    SleepStatus.OPTIMAL: [
        "Keep your current sleep schedule",
        "Keep your bedroom dark, quiet and cool",
    ],
    SleepStatus.EXCESSIVE: [
        "Set a consistent wake-up time and avoid oversleeping",
        "Get daylight exposure in the morning",
        "Talk to a doctor if you feel tired despite long sleep",
    ],
}

WATER_LITERS_PER_KG = 0.033
HYDRATION_TIPS: dict[HydrationStatus, list[str]] = {
    HydrationStatus.INSUFFICIENT: [
        "Carry a water bottle during the day",
        "Drink a glass of water with every meal",
        "Drink more on hot days and after exercise",
    ],
    HydrationStatus.OPTIMAL: [
        "Keep drinking water regularly through the day",
        "Increase intake on hot days and after exercise",
    ],
}

GENERAL_HEALTH_STATUS = "Consult a professional for accurate advice"
GENERAL_RECOMMENDATIONS: tuple[str, ...] = (
    "Eat whole foods",
    "Exercise regularly",
    "Manage stress",
    "Sleep well",
    "Stay hydrated",
)
NO_SYMPTOMS_TEXT = "No symptoms reported"


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up (2.5 -> 3, -2.5 -> -2), unlike built-in round()."""
    exact = Decimal(value)
    # Wide enough to hold any finite float exactly
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        if digits == 0:
            return float((exact + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))
        return float(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def bmi_category(bmi: float) -> BmiCategory:
    for upper, category in BMI_THRESHOLDS:
        if bmi < upper:
            return category
    return BmiCategory.OBESE


def calculate_bmi(record: BiometricRecord) -> BmiResult:
    height_m = record.height / 100
    value = round_half_up(record.weight / (height_m * height_m), 1)
    category = bmi_category(value)
    return BmiResult(value=value, category=category, recommendation=BMI_RECOMMENDATIONS[category])


def is_male(gender: str) -> bool:
    """Only "male" (any case) selects the male formula; every other value is female."""
    return gender.lower() == Gender.MALE.value


def calculate_bmr(record: BiometricRecord) -> BmrResult:
    """Mifflin-St Jeor: 10*kg + 6.25*cm - 5*age, +5 for men, -161 otherwise."""
    normalized = record.gender.lower()
    if normalized not in (Gender.MALE.value, Gender.FEMALE.value):
        logger.warning("Unknown gender %r, using female BMR formula", record.gender)
    base = 10 * record.weight + 6.25 * record.height - 5 * record.age
    bmr = base + 5 if is_male(record.gender) else base - 161
    return BmrResult(value=int(round_half_up(bmr)), explanation=BMR_EXPLANATION)


def activity_multiplier(activity_level: str) -> float:
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level)
    if multiplier is None:
        logger.warning("Unknown activity level %r, using sedentary multiplier", activity_level)
        return DEFAULT_ACTIVITY_MULTIPLIER
    return multiplier


def calculate_calorie_needs(record: BiometricRecord, bmr: int | None = None) -> CalorieNeeds:
    """Maintenance = rounded BMR x activity multiplier; loss/gain are -/+500 kcal."""
    if bmr is None:
        bmr = calculate_bmr(record).value
    maintenance = int(round_half_up(bmr * activity_multiplier(record.activity_level)))
    return CalorieNeeds(
        maintenance=maintenance,
        weight_loss=maintenance - CALORIE_ADJUSTMENT,
        weight_gain=maintenance + CALORIE_ADJUSTMENT,
        recommendation=CALORIE_RECOMMENDATION,
    )


def sleep_status(hours: float) -> SleepStatus:
    low, high = SLEEP_RANGE_HOURS
    if hours < low:
        return SleepStatus.INSUFFICIENT
    if hours > high:
        return SleepStatus.EXCESSIVE
    return SleepStatus.OPTIMAL


def analyze_sleep(record: BiometricRecord) -> SleepAnalysis:
    low, high = SLEEP_RANGE_HOURS
    status = sleep_status(record.sleep_hours)
    return SleepAnalysis(
        current=record.sleep_hours,
        recommended=f"{low}-{high} hours",
        status=status,
        tips=list(SLEEP_TIPS[status]),
    )


def recommended_water_intake(weight: float) -> int:
    """Liters per day, rounded to a whole liter."""
    return int(round_half_up(weight * WATER_LITERS_PER_KG))


def analyze_hydration(record: BiometricRecord) -> HydrationAnalysis:
    recommended = recommended_water_intake(record.weight)
    status = HydrationStatus.INSUFFICIENT if record.water_intake < recommended else HydrationStatus.OPTIMAL
    return HydrationAnalysis(
        current=record.water_intake,
        recommended=recommended,
        status=status,
        tips=list(HYDRATION_TIPS[status]),
    )


def general_health(symptoms: str | None = None) -> GeneralHealth:
    reported = (symptoms or "").strip() or NO_SYMPTOMS_TEXT
    return GeneralHealth(
        status=GENERAL_HEALTH_STATUS,
        recommendations=list(GENERAL_RECOMMENDATIONS),
        reported_symptoms=reported,
    )


def analyze_health(record: BiometricRecord) -> MetricsResult:
    """Run every calculator on one validated record."""
    bmr = calculate_bmr(record)
    return MetricsResult(
        bmi=calculate_bmi(record),
        bmr=bmr,
        calorie_needs=calculate_calorie_needs(record, bmr=bmr.value),
        sleep_analysis=analyze_sleep(record),
        hydration_analysis=analyze_hydration(record),
        general_health=general_health(record.symptoms),
    )
