import copy

import pytest

SAMPLE_SNAPSHOT = {
    "hero": {"name": "Ada Example", "email": "ada@hero.dev", "location": "Lisbon"},
    "contact": {"email": "ada@example.com", "phone": "+1 555 0100", "location": "Porto"},
    "skills": [
        {"name": "Python", "level": 95},
        {"name": "Go", "level": 90},
        {"name": "Rust", "level": 80},
        {"name": "SQL", "level": 85},
        {"name": "Docker", "level": 75},
    ],
    "experiences": [
        {"role": "Engineer", "company": "Acme", "period": "2020-2023"},
        {"role": "Lead", "company": "Globex", "period": "2023-now"},
    ],
    "projects": [{"title": f"Project {i}"} for i in range(1, 9)],
    "education": [
        {"degree": "BSc CS", "institution": "Uni A", "year": "2019"},
        {"degree": "MSc AI", "institution": "Uni B"},
    ],
    "testimonials": [],
    "blogPosts": [],
    "navItems": [],
    "achievements": [
        {"title": "Uptime Champion", "description": "Kept the payments API up all year", "stats": "99.99%"},
    ],
    "certifications": [
        {"name": "CKA", "issuer": "CNCF", "year": "2022"},
        {"name": "AWS SAA", "issuer": "Amazon"},
    ],
}

EMPTY_SNAPSHOT = {
    "hero": {},
    "contact": {},
    "skills": [],
    "experiences": [],
    "projects": [],
    "education": [],
    "testimonials": [],
    "blogPosts": [],
    "navItems": [],
    "achievements": [],
    "certifications": [],
}


@pytest.fixture
def sample_snapshot():
    return copy.deepcopy(SAMPLE_SNAPSHOT)


@pytest.fixture
def empty_snapshot():
    return copy.deepcopy(EMPTY_SNAPSHOT)
