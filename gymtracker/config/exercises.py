"""Predefined exercise catalog.

Catalog IDs are fixed slugs of the display name, so an exercise picked from
the catalog gets the same ID in every session.
"""

from pydantic import BaseModel

from gymtracker.models import SessionCategory

LEGS = SessionCategory.LEGS
CHEST = SessionCategory.CHEST
BACK = SessionCategory.BACK
ARMS = SessionCategory.ARMS
SHOULDERS = SessionCategory.SHOULDERS
CORE = SessionCategory.CORE
CARDIO = SessionCategory.CARDIO
FULL_BODY = SessionCategory.FULL_BODY
MIXED = SessionCategory.MIXED


class PredefinedExercise(BaseModel):
    id: str
    name: str
    categories: list[SessionCategory]  # an exercise can belong to several


# fmt: off
PREDEFINED_EXERCISES: list[PredefinedExercise] = [
    PredefinedExercise(id=id_, name=name, categories=categories)
    for id_, name, categories in [
        # Legs
        ("squat", "Squat", [LEGS]),
        ("leg_press", "Leg Press", [LEGS]),
        ("leg_curl_hamstring", "Leg Curl (Hamstring)", [LEGS]),
        ("hamstring_curls", "Hamstring Curls", [LEGS]),
        ("leg_extension", "Leg Extension", [LEGS]),
        ("romanian_deadlift", "Romanian Deadlift", [LEGS, BACK]),
        ("calf_raises", "Calf Raises", [LEGS]),
        ("bulgarian_split_squat", "Bulgarian Split Squat", [LEGS]),
        ("lunges", "Lunges", [LEGS]),
        ("hack_squat", "Hack Squat", [LEGS]),
        # Chest
        ("barbell_bench_press", "Barbell Bench Press", [CHEST]),
        ("dumbbell_bench_press", "Dumbbell Bench Press", [CHEST]),
        ("incline_dumbbell_press", "Incline Dumbbell Press", [CHEST]),
        ("incline_barbell_press", "Incline Barbell Press", [CHEST]),
        ("decline_bench_press", "Decline Bench Press", [CHEST]),
        ("chest_fly", "Chest Fly", [CHEST]),
        ("dumbbell_fly", "Dumbbell Fly", [CHEST]),
        ("cable_fly", "Cable Fly", [CHEST]),
        ("push_ups", "Push-ups", [CHEST]),
        ("dips", "Dips", [CHEST, ARMS]),
        # Back
        ("deadlift", "Deadlift", [BACK]),
        ("pull_ups", "Pull Ups", [BACK]),
        ("bent_over_row", "Bent Over Row", [BACK]),
        ("t_bar_row", "T-Bar Row", [BACK]),
        ("seated_cable_row", "Seated Cable Row", [BACK]),
        ("lat_pulldown", "Lat Pulldown", [BACK]),
        ("one_arm_dumbbell_row", "One-Arm Dumbbell Row", [BACK]),
        ("cable_row", "Cable Row", [BACK]),
        ("face_pulls", "Face Pulls", [BACK, SHOULDERS]),
        ("shrugs", "Shrugs", [BACK, SHOULDERS]),
        # Arms
        ("barbell_bicep_curl", "Barbell Bicep Curl", [ARMS]),
        ("dumbbell_bicep_curl", "Dumbbell Bicep Curl", [ARMS]),
        ("hammer_curl", "Hammer Curl", [ARMS]),
        ("tricep_pushdown", "Tricep Pushdown", [ARMS]),
        ("overhead_tricep_extension", "Overhead Tricep Extension", [ARMS]),
        ("close_grip_bench_press", "Close-Grip Bench Press", [ARMS]),
        ("preacher_curl", "Preacher Curl", [ARMS]),
        ("cable_curl", "Cable Curl", [ARMS]),
        ("tricep_dips", "Tricep Dips", [ARMS]),
        # Shoulders
        ("overhead_press", "Overhead Press", [SHOULDERS]),
        ("dumbbell_shoulder_press", "Dumbbell Shoulder Press", [SHOULDERS]),
        ("lateral_raise", "Lateral Raise", [SHOULDERS]),
        ("front_raise", "Front Raise", [SHOULDERS]),
        ("rear_delt_fly", "Rear Delt Fly", [SHOULDERS]),
        ("upright_row", "Upright Row", [SHOULDERS]),
        ("arnold_press", "Arnold Press", [SHOULDERS]),
        ("cable_lateral_raise", "Cable Lateral Raise", [SHOULDERS]),
        # Core
        ("plank", "Plank", [CORE]),
        ("crunches", "Crunches", [CORE]),
        ("russian_twists", "Russian Twists", [CORE]),
        ("leg_raises", "Leg Raises", [CORE]),
        ("dead_bug", "Dead Bug", [CORE]),
        ("mountain_climbers", "Mountain Climbers", [CORE]),
        # Cardio
        ("running", "Running", [CARDIO]),
        ("cycling", "Cycling", [CARDIO]),
        ("rowing", "Rowing", [CARDIO]),
        ("elliptical", "Elliptical", [CARDIO]),
        ("stair_climber", "Stair Climber", [CARDIO]),
        # Full body / mixed
        ("burpees", "Burpees", [FULL_BODY, MIXED]),
        ("kettlebell_swings", "Kettlebell Swings", [FULL_BODY, MIXED]),
        ("thruster", "Thruster", [FULL_BODY, MIXED]),
    ]
]
# fmt: on

_BY_NAME: dict[str, PredefinedExercise] = {}
_BY_ID: dict[str, PredefinedExercise] = {}
for _exercise in PREDEFINED_EXERCISES:
    # First entry wins, matching a front-to-back search.
    _BY_NAME.setdefault(_exercise.name, _exercise)
    _BY_ID.setdefault(_exercise.id, _exercise)


def get_predefined_exercise_by_name(name: str) -> PredefinedExercise | None:
    """Look up a catalog exercise by exact, case-sensitive name."""
    return _BY_NAME.get(name)


def get_predefined_exercise_by_id(exercise_id: str) -> PredefinedExercise | None:
    return _BY_ID.get(exercise_id)


def get_all_exercise_names() -> list[str]:
    """Get every catalog name once, in catalog order (for search/autocomplete)."""
    return list(dict.fromkeys(e.name for e in PREDEFINED_EXERCISES))


def get_exercises_by_category(
    category: SessionCategory | None = None,
) -> list[PredefinedExercise]:
    """Get catalog exercises in a category, or all of them if category is None."""
    if category is None:
        return list(PREDEFINED_EXERCISES)
    return [e for e in PREDEFINED_EXERCISES if category in e.categories]
