import pytest


@pytest.fixture()
def domains(identity_domain, ordering_domain):
    return {"identity": identity_domain, "ordering": ordering_domain}


@pytest.fixture(autouse=True)
def run_around_tests(domains):
    """Clean both contexts' stores after every test."""
    yield

    from protean import current_domain

    for domain in domains.values():
        with domain.domain_context():
            for _, provider in current_domain.providers.items():
                provider._data_reset()
            current_domain.event_store.store._data_reset()
