import os
from pathlib import Path

import pytest

# Directory fragment -> markers applied to every test collected beneath it
_DIRECTORY_MARKERS = {
    "/domain/": ("domain",),
    "/application/": ("application",),
    "/integration/": ("integration", "slow"),
    "/bdd/": ("integration", "slow"),
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="domain.toml environment overlay to run tests against",
    )


def pytest_sessionstart(session):
    """Initialize the storefront domain and push its context before collection.

    Test modules import aggregates and commands at module level, so the domain
    must already be active when they are collected.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    # Import the element modules before init(), as app.py does, so init()
    # sets up the same classes the tests and routes use.
    import storefront.api  # noqa: F401
    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    for item in items:
        test_path = Path(item.fspath).as_posix()
        for fragment, markers in _DIRECTORY_MARKERS.items():
            if fragment not in test_path:
                continue
            has_fast = any(m.name == "fast" for m in item.iter_markers())
            for marker in markers:
                if marker == "slow" and has_fast:
                    continue
                item.add_marker(getattr(pytest.mark, marker))
            break


@pytest.fixture(scope="session", autouse=True)
def database_schema():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)
    yield
    drop_db(storefront)


@pytest.fixture(autouse=True)
def clean_storefront():
    """Wipe persisted state and swap adapters back to their defaults after each test."""
    from protean import current_domain

    from storefront.cache import reset_cache
    from storefront.payments.gateway import reset_gateway
    from storefront.utils.logging import clear_context

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()
    current_domain.event_store.store._data_reset()

    reset_cache()
    reset_gateway()
    clear_context()
