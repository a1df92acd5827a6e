# Path: cpms/tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for cpms

Provides common test fixtures used across all test modules.
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

# Add the project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cpms.tests.fixtures.sample_data import (  # noqa: E402
    LOGIN_HTML,
    create_email_concept_document,
    create_login_observation_document,
    create_login_pattern_document,
    create_localized_observation_document,
    create_payment_concept_documents,
    create_payment_observation_document,
    create_payment_pattern_document,
    create_scoring_concept_document,
    create_swap_concept_documents,
    create_swap_observation_document,
    create_swap_pattern_document,
)


# ==============================================================================
# ENVIRONMENT FIXTURES
# ==============================================================================

@pytest.fixture
def mock_env_vars():
    """Provide mock environment variables for testing."""
    env_vars = {
        'CPMS_ENVIRONMENT': 'test',
        'CPMS_DEBUG': 'true',

        # Logging
        'CPMS_LOG_LEVEL': 'DEBUG',
        'CPMS_LOG_CONSOLE': 'false',

        # Matching defaults
        'CPMS_PATTERN_TOP_K': '4',
        'CPMS_PATTERN_MAX_REPAIRS': '6',
        'CPMS_DECISION_TOP_K': '2',
        'CPMS_SWAP_EPSILON': '0.001',

        # Output
        'CPMS_OUTPUT_FORMAT': 'text',
        'CPMS_JSON_INDENT': '4',
    }

    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def reset_singletons():
    """Reset singleton instances and formatter registrations between tests."""
    from cpms.config_loader import ConfigLoader
    from cpms.output import FormatterRegistry, register_default_formatters

    ConfigLoader.reset()
    yield
    ConfigLoader.reset()

    FormatterRegistry.clear()
    register_default_formatters()


# ==============================================================================
# MODEL FIXTURES
# ==============================================================================

@pytest.fixture
def email_concept():
    """The login email concept."""
    from cpms.process.matcher.models import Concept
    return Concept.model_validate(create_email_concept_document())


@pytest.fixture
def login_observation():
    """Email and password inputs of a login page."""
    from cpms.process.matcher.models import Observation
    return Observation.model_validate(create_login_observation_document())


@pytest.fixture
def localized_observation():
    """A login page labelled in Spanish."""
    from cpms.process.matcher.models import Observation
    return Observation.model_validate(create_localized_observation_document())


@pytest.fixture
def scoring_concept():
    """Concept scored with calibration none."""
    from cpms.process.matcher.models import Concept
    return Concept.model_validate(create_scoring_concept_document())


@pytest.fixture
def swap_concepts():
    """Two concepts competing for one candidate."""
    from cpms.process.matcher.models import Concept
    return [Concept.model_validate(doc) for doc in create_swap_concept_documents()]


@pytest.fixture
def swap_pattern():
    from cpms.process.matcher.models import Pattern
    return Pattern.model_validate(create_swap_pattern_document())


@pytest.fixture
def swap_observation():
    from cpms.process.matcher.models import Observation
    return Observation.model_validate(create_swap_observation_document())


@pytest.fixture
def payment_concepts():
    """The five card payment concepts."""
    from cpms.process.matcher.models import Concept
    return [Concept.model_validate(doc) for doc in create_payment_concept_documents()]


@pytest.fixture
def payment_pattern():
    from cpms.process.matcher.models import Pattern
    return Pattern.model_validate(create_payment_pattern_document())


@pytest.fixture
def payment_observation():
    from cpms.process.matcher.models import Observation
    return Observation.model_validate(create_payment_observation_document())


@pytest.fixture
def login_pattern():
    from cpms.process.matcher.models import Pattern
    return Pattern.model_validate(create_login_pattern_document())


# ==============================================================================
# FILE CREATION FIXTURES
# ==============================================================================

@pytest.fixture
def dictionary_dir(tmp_path):
    """A dictionary directory holding the payment concepts and pattern."""
    concepts_dir = tmp_path / 'dictionary' / 'concepts' / 'payment'
    patterns_dir = tmp_path / 'dictionary' / 'patterns'
    concepts_dir.mkdir(parents=True)
    patterns_dir.mkdir(parents=True)

    for document in create_payment_concept_documents():
        name = document['concept_id'].split(':')[1].split('@')[0]
        with open(concepts_dir / f'{name}.yaml', 'w', encoding='utf-8') as f:
            yaml.safe_dump(document, f, allow_unicode=True, sort_keys=False)

    with open(patterns_dir / 'payment.json', 'w', encoding='utf-8') as f:
        json.dump(create_payment_pattern_document(), f, indent=2)

    return tmp_path / 'dictionary'


@pytest.fixture
def login_html_file(tmp_path):
    """A login page written to disk."""
    path = tmp_path / 'login.html'
    path.write_text(LOGIN_HTML, encoding='utf-8')
    return path


@pytest.fixture
def login_observation_file(tmp_path):
    """The login observation written as JSON."""
    path = tmp_path / 'login_observation.json'
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(create_login_observation_document(), f, indent=2)
    return path


@pytest.fixture
def email_concept_file(tmp_path):
    """The email concept written as YAML."""
    path = tmp_path / 'email.yaml'
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(create_email_concept_document(), f, sort_keys=False)
    return path


# ==============================================================================
# MOCK FIXTURES
# ==============================================================================

@pytest.fixture
def mock_config():
    """Create a mock ConfigLoader for testing."""
    config = MagicMock()
    config.get.side_effect = lambda key, default=None: {
        'environment': 'test',
        'debug': True,
        'log_dir': None,
        'log_level': 'INFO',
        'log_console': False,
        'dictionary_dir': None,
        'compile_documents': True,
        'pattern_top_k': 3,
        'pattern_max_repairs': 2,
        'decision_top_k': 1,
        'swap_epsilon': 0.01,
        'output_format': 'json',
        'json_indent': 2,
    }.get(key, default)
    return config
