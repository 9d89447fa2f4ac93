import pytest # type: ignore
from cvmcount.lib.streams import take, uniform_integers

def pytest_configure(config):
    """Add markers to the pytest configuration."""
    config.addinivalue_line("markers", "quick: mark test as quick to run")
    config.addinivalue_line("markers", "full: mark test as part of the full test suite")
    config.addinivalue_line("markers", "slow: mark test as very slow to run")

@pytest.fixture
def random_stream():
    """20000 seeded random integers from [0, 5000)."""
    return list(take(uniform_integers(0, 5000, seed=2024), 20000))
