import pytest

from gauthgen import GoogleAuthenticator

# RFC 4226 appendix D secret "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_CODES = ["755224", "287082", "359152", "969429", "338314",
             "254676", "287922", "162583", "399871", "520489"]


@pytest.fixture
def auth():
    return GoogleAuthenticator()
