import json
import os

import pytest

# Console-only logging, set before the application modules are imported
os.environ.setdefault("ENVIRONMENT", "testing")

from factories import SCENARIO_RESULT  # noqa: E402


@pytest.fixture
def scenario_criteria():
    return {
        "keywords": ["python"],
        "requiredExperience": "2 years",
        "techStack": ["docker"],
        "degree": "BSc",
        "additionalAttributes": "",
    }


@pytest.fixture
def scenario_result():
    return json.loads(json.dumps(SCENARIO_RESULT))


@pytest.fixture
def resume_document():
    from resume_screener.models.schemas import DocumentSource
    return DocumentSource(filename="jane_doe.pdf", source=b"%PDF-1.4 fake resume")
