import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def warehouse_bed():
    from warehouse.domain import warehouse

    bed = DomainFixture(warehouse)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(warehouse_bed):
    with warehouse_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _adapters():
    """Give every test fresh fake adapters."""
    from warehouse.mirror import reset_mirror
    from warehouse.renderer import reset_renderer

    reset_mirror()
    reset_renderer()
    yield
    reset_mirror()
    reset_renderer()
