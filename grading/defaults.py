DEFAULT_SCALE_NAME = "Standard Scale"

# (letter, min %, max %, grade points, description), descending by min %
DEFAULT_GRADE_DEFINITIONS = [
    ("A+", 95, 100, 4.0, "Exceptional"),
    ("A", 90, 94, 4.0, "Excellent"),
    ("A-", 87, 89, 3.7, "Very Good"),
    ("B+", 83, 86, 3.3, "Good"),
    ("B", 80, 82, 3.0, "Above Average"),
    ("B-", 77, 79, 2.7, "Average"),
    ("C+", 73, 76, 2.3, "Below Average"),
    ("C", 70, 72, 2.0, "Satisfactory"),
    ("C-", 67, 69, 1.7, "Pass"),
    ("D+", 63, 66, 1.3, "Marginal Pass"),
    ("D", 60, 62, 1.0, "Minimum Pass"),
    ("F", 0, 59, 0.0, "Fail"),
]


def default_definitions():
    return [
        {"letter": letter, "min_percentage": lo, "max_percentage": hi,
         "grade_points": gp, "description": desc}
        for letter, lo, hi, gp, desc in DEFAULT_GRADE_DEFINITIONS
    ]
