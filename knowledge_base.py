import logging
from types import MappingProxyType

import config

logger = logging.getLogger(__name__)

# ============================================================
# TOPICS
# ============================================================

TOPICS = (
    "skills",
    "experience",
    "projects",
    "education",
    "contact",
    "location",
    "technologies",
    "availability",
    "strengths",
    "interests",
)

INTERESTS_TEXT = "Passionate about automation, AI, and building reliable systems."

# ============================================================
# HELPER FUNCTIONS
# ============================================================

def _records(snapshot, key):
    value = snapshot.get(key) if snapshot else None
    if not isinstance(value, (list, tuple)):
        return []
    return [r for r in value if isinstance(r, dict)]


def _section(snapshot, key):
    value = snapshot.get(key) if snapshot else None
    return value if isinstance(value, dict) else {}


def _field(record, key):
    """Text of an optional record field; missing or null renders as ''."""
    value = record.get(key)
    return "" if value is None else str(value)

# ============================================================
# TOPIC FORMATTERS
# ============================================================

def _skills_text(skills):
    if not skills:
        return "Skills information is not available."
    top = skills[:config.SKILLS_IN_SUMMARY]
    return "Top skills: " + ", ".join(
        f"{_field(s, 'name')} ({_field(s, 'level')}%)" for s in top
    ) + "."


def _experience_text(experiences):
    if not experiences:
        return "Experience information is not available."
    return "; ".join(
        f"{_field(e, 'role')} at {_field(e, 'company')} ({_field(e, 'period')})"
        for e in experiences
    )


def _projects_text(projects):
    if not projects:
        return "Project information is not available."
    top = projects[:config.PROJECTS_IN_SUMMARY]
    return "Projects: " + "; ".join(_field(p, "title") for p in top) + "."


def _education_text(education):
    if not education:
        return "Education information is not available."
    return "; ".join(
        f"{_field(ed, 'degree')} — {_field(ed, 'institution')} ({_field(ed, 'year')})"
        for ed in education
    )


def _location_value(contact, hero):
    return _field(contact, "location") or _field(hero, "location") or None


def _contact_text(contact, hero):
    email = _field(contact, "email")
    phone = _field(contact, "phone")
    if not (email or phone):
        return "Contact information is not available."

    if email:
        reach = email + (f" | {phone}" if phone else "")
    else:
        reach = phone
    location = _location_value(contact, hero) or "N/A"
    return f"Contact: {reach}. Location: {location}"


def _availability_text(contact):
    email = _field(contact, "email")
    if not email:
        return "Availability information not available."
    return f"Reach out via {email} for opportunities."


def _technologies_text(skills):
    if not skills:
        return "Technologies not listed."
    return ", ".join(_field(s, "name") for s in skills)


def _strengths_text(skills):
    if not skills:
        return "Strengths not available."
    top = skills[:config.STRENGTHS_IN_SUMMARY]
    return "Strengths include " + ", ".join(_field(s, "name") for s in top) + "."

# ============================================================
# BUILDER
# ============================================================

def build_knowledge_base(snapshot):
    """
    Turns a portfolio snapshot into the assistant's topic -> answer mapping.

    Total and pure: every one of the ten topics gets a value, falling back
    to a placeholder sentence whenever the source data is absent. The result
    is a read-only mapping; the same snapshot always yields the same text.
    """
    hero = _section(snapshot, "hero")
    contact = _section(snapshot, "contact")
    skills = _records(snapshot, "skills")
    experiences = _records(snapshot, "experiences")
    projects = _records(snapshot, "projects")
    education = _records(snapshot, "education")

    kb = {
        "skills": _skills_text(skills),
        "experience": _experience_text(experiences),
        "projects": _projects_text(projects),
        "education": _education_text(education),
        "contact": _contact_text(contact, hero),
        "location": _location_value(contact, hero) or "Location not set.",
        "technologies": _technologies_text(skills),
        "availability": _availability_text(contact),
        "strengths": _strengths_text(skills),
        "interests": INTERESTS_TEXT,
    }
    return MappingProxyType(kb)


class KnowledgeBaseHolder:
    """
    Owns the knowledge base for one snapshot. Built once at construction;
    `refresh` rebuilds only when handed a different snapshot object.
    """

    def __init__(self, snapshot):
        self._snapshot = snapshot
        self._kb = build_knowledge_base(snapshot)

    @property
    def knowledge_base(self):
        return self._kb

    @property
    def snapshot(self):
        return self._snapshot

    def refresh(self, snapshot) -> bool:
        """Rebuild if `snapshot` is a new object. Returns True when rebuilt."""
        if snapshot is self._snapshot:
            return False
        self._snapshot = snapshot
        self._kb = build_knowledge_base(snapshot)
        logger.info("Knowledge base rebuilt for new portfolio snapshot.")
        return True
