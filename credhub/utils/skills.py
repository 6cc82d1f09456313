"""Skill-name helpers shared by the matching engine and the AI service."""

import math
from typing import Iterable, List


def skill_names(skills: Iterable) -> List[str]:
    """
    Case-folded names from a mixed list of strings and {"name": ...} dicts.
    Blank names are dropped: an empty string is a substring of everything.
    """
    names = []
    for skill in skills or []:
        name = skill.get("name") if isinstance(skill, dict) else skill
        if isinstance(name, str) and name.strip():
            names.append(name.strip().lower())
    return names


def skills_overlap(learner_skill: str, required_skill: str) -> bool:
    """Bidirectional substring containment on lower-cased names."""
    a = learner_skill.lower()
    b = required_skill.lower()
    if not a or not b:
        return False
    return a in b or b in a


def has_skill(learner_skills: Iterable[str], required_skill: str) -> bool:
    return any(skills_overlap(s, required_skill) for s in learner_skills)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))
