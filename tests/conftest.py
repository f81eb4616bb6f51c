import pytest


@pytest.fixture(autouse=True)
def _fresh_settings():
    from crosswalk.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
