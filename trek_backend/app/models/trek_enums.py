"""
Trek-related enumerations.
"""

import enum


class TrekDifficulty(str, enum.Enum):
    """Trek difficulty grading shown on the catalogue."""
    EASY = "Easy"
    MODERATE = "Moderate"
    CHALLENGING = "Challenging"
