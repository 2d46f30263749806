import pytest
import structlog

from idcheck.check.registry import RuleRegistry
from idcheck.engine.dispatcher import ValidationDispatcher
from idcheck.models import ValidationRequest


@pytest.fixture(scope="session")
def registry():
    # shipped packs and reference data
    return RuleRegistry.build()


@pytest.fixture(scope="session")
def dispatcher(registry):
    return ValidationDispatcher(registry)


@pytest.fixture
def check(dispatcher):
    """check("BR", "personal", "cpf", "123.456.789-09") -> ValidationOutcome"""
    def _check(jurisdiction, domain, field, value, region=None):
        return dispatcher.validate(ValidationRequest.build(jurisdiction, domain, field, value, region))
    return _check


@pytest.fixture(autouse=True)
def _reset_structlog():
    # the CLI reconfigures structlog globally
    yield
    structlog.reset_defaults()
