"""
Pytest configuration file for the DentalCare test suite.

This file defines shared fixtures used across the test modules:
- A temporary, Fernet-encrypted data file so tests never touch real records.
- Services built on that file, either with the seed data or empty.
- Helpers for signing in as the seeded admin or a seeded patient.
- A service whose storage writes fail, for the recovery paths.
"""
import pytest
from cryptography.fernet import Fernet

from dentalcare.errors import StorageError
from dentalcare.service import DentalCareService
from dentalcare.storage import LocalStorage


class FailingStorage(LocalStorage):
    """An in-memory store whose writes start failing once `broken` is set."""

    broken = False

    def _save(self):
        if self.broken:
            raise StorageError("disk full")


@pytest.fixture
def encryptor():
    """Provides a Fernet instance with a throwaway key."""
    return Fernet(Fernet.generate_key())


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "records.json"


@pytest.fixture
def storage(data_file, encryptor):
    """Provides an encrypted LocalStorage backed by a temporary file."""
    return LocalStorage(data_file, encryptor=encryptor)


@pytest.fixture
def reopen(data_file, encryptor):
    """Returns a callable that opens a fresh store over the same data file."""
    def _reopen():
        return LocalStorage(data_file, encryptor=encryptor)
    return _reopen


@pytest.fixture
def service(storage):
    """Provides a service loaded with the seed patients and incidents."""
    return DentalCareService(storage=storage)


@pytest.fixture
def empty_service():
    """Provides an in-memory service with no patients or incidents."""
    return DentalCareService(
        storage=LocalStorage(),
        seed_patients=lambda: [],
        seed_incidents=lambda: [],
    )


@pytest.fixture
def failing_service():
    """Provides a seeded admin service whose storage rejects every write."""
    storage = FailingStorage()
    svc = DentalCareService(storage=storage)
    assert svc.login("admin@entnt.in", "admin123")
    storage.broken = True
    return svc


@pytest.fixture
def admin_service(service):
    """Provides a seeded service with the admin signed in."""
    assert service.login("admin@entnt.in", "admin123")
    return service


@pytest.fixture
def patient_service(service):
    """Provides a seeded service with John Doe (p1) signed in."""
    assert service.login("john@entnt.in", "patient123")
    return service
