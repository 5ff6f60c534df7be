import pytest

from generate import generate_vector
from schemes import DILITHIUM5, ML_DSA_87, derive_keypair


# Keygen and signing are pure Python, so compute each vector once per session

@pytest.fixture(scope="session")
def dilithium5_keypair():
    return derive_keypair(DILITHIUM5)


@pytest.fixture(scope="session")
def mldsa87_keypair():
    return derive_keypair(ML_DSA_87)


@pytest.fixture(scope="session")
def dilithium5_vector():
    return generate_vector(DILITHIUM5)


@pytest.fixture(scope="session")
def mldsa87_vector():
    return generate_vector(ML_DSA_87)


@pytest.fixture
def vectors(dilithium5_vector, mldsa87_vector):
    return {
        DILITHIUM5.tag: dilithium5_vector,
        ML_DSA_87.tag: mldsa87_vector,
    }
