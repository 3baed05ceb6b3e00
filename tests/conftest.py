import pytest

from sm2_cipher import generate_key_pair
from sm2_cipher.crypto.utils import SM2Crypto


@pytest.fixture(scope="module")
def keypair():
    return generate_key_pair()


@pytest.fixture(scope="module")
def raw_keypair():
    return SM2Crypto.generate_keypair()
