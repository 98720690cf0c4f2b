import pytest

from resbundle.reporting import set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _reset_reporter():
    # Reporter and verbosity are process globals set by the CLI.
    set_reporter(None)
    set_verbosity(0)
    yield
    set_reporter(None)
    set_verbosity(0)
