"""
Shared pytest fixtures for the ZeroSeed test suite.
"""

import pytest

from zeroseed_core.scoring import LeadingZeroBytes
from zeroseed_core.search import SearchCoordinator
from zeroseed_core.wallet import DerivationPath, load_wordlist


@pytest.fixture(scope="session")
def wordlist():
    """The bundled English BIP-39 dictionary."""
    return load_wordlist()


@pytest.fixture
def zero_entropy():
    return b"\x00" * 16


@pytest.fixture
def eth_path():
    return DerivationPath.parse("m/44'/60'/0'/0/0")


@pytest.fixture
def coordinator():
    """Coordinator that is never started; used to drive handle_candidate."""
    coord = SearchCoordinator(LeadingZeroBytes(), workers=2)
    yield coord
    coord.results.cancel_join_thread()
    coord.results.close()
