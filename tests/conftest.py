"""Shared fixtures: sample documents in current and legacy shapes."""

import os

import pytest

# keep a developer's .env from pointing tests at a real store
os.environ.setdefault("CVDOC_DATA_DIR", ".cvdoc-test")


@pytest.fixture
def canonical_cv():
    return {
        "personalInfo": {
            "fullName": "Juan Pérez",
            "title": "Dev",
            "photo": "",
            "email": "juan@test.com",
            "phone": "+54 11 1234-5678",
            "location": "Buenos Aires",
            "linkedin": "",
            "website": "",
        },
        "summary": "About me",
        "experience": [
            {
                "id": "exp-1",
                "company": "Acme",
                "position": "Dev",
                "startDate": "2020",
                "endDate": "2021",
                "description": "<ul><li><p>Shipped <strong>things</strong></p></li></ul>",
            },
        ],
        "education": [
            {
                "id": "edu-1",
                "institution": "MIT",
                "degree": "CS",
                "startDate": "2016",
                "endDate": "2020",
                "description": "Thesis on graphs",
            },
        ],
        "skills": [{"id": "skill-1", "category": "Front", "items": ["React", "CSS"]}],
        "courses": [],
        "certifications": [],
        "awards": [],
        "visibility": {
            "location": True,
            "linkedin": True,
            "website": True,
            "summary": True,
            "courses": False,
            "certifications": False,
            "awards": False,
        },
        "sidebarOrder": ["contact", "summary", "skills"],
    }


@pytest.fixture
def legacy_cv():
    return {
        "personalInfo": {
            "fullName": "Test User",
            "title": "Dev",
            "contacts": [
                {"type": "email", "value": "test@example.com"},
                {"type": "phone", "value": "+1234"},
                {"type": "location", "value": "NYC"},
            ],
        },
        "summary": "A **bold** summary",
        "experiences": [
            {
                "id": "1",
                "company": "A",
                "position": "B",
                "startDate": "2020",
                "endDate": "2024",
                "roleDescription": "Led the team",
                "description": [
                    {"text": "Did **stuff**", "type": "bullet"},
                    {"text": "More stuff", "type": "comment"},
                    {"text": "Notes", "type": "subheading"},
                ],
            },
        ],
        "education": [
            {"institution": "MIT", "degree": "CS", "description": "Focus on **machine learning**"},
        ],
        "skillCategories": [{"category": "Tools", "items": ["Git", {"name": "Docker"}, None]}],
        "sidebarSections": ["skills", "bogus"],
    }
