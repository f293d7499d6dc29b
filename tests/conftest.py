"""
Shared fixtures for the DentSync tests.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest


class FakeAuthProvider:
    """In-memory auth provider that reports whatever the test tells it to."""

    def __init__(self, accounts=None):
        self.accounts = accounts or {}
        self.listeners = []
        self.signed_out = False

    def subscribe(self, on_change):
        self.listeners.append(on_change)
        return lambda: self.listeners.remove(on_change)

    def emit(self, user):
        for listener in list(self.listeners):
            listener(user)

    def sign_in(self, email, password):
        from dentsync.auth import AuthError

        user = self.accounts.get((email, password))
        if user is None:
            raise AuthError("Invalid email or password")
        self.emit(user)
        return user

    def sign_out(self):
        self.signed_out = True
        self.emit(None)


@pytest.fixture
def make_patient():
    from dentsync.models import Gender, Patient

    def factory(**overrides):
        fields = {
            "first_name": "Asha",
            "last_name": "Rao",
            "date_of_birth": "1990-04-12",
            "gender": Gender.FEMALE,
            "phone": "9876543210",
        }
        fields.update(overrides)
        return Patient(**fields)

    return factory


@pytest.fixture
def patient(make_patient):
    from dentsync.models import BillingEntry, TreatmentPlanItem, TreatmentStatus

    return make_patient(
        id="p1",
        billing=[BillingEntry(id="b1", date="2024-03-01", description="Cleaning", amount=1500.0)],
        treatment_plan=[
            TreatmentPlanItem(
                id="t1",
                procedure="Root Canal",
                tooth="36",
                status=TreatmentStatus.COMPLETED,
                cost=6000.0,
                date="2024-03-01",
            ),
        ],
    )


@pytest.fixture
def state(patient):
    from dentsync.models import AppState

    return AppState(patients=[patient])


@pytest.fixture
def storage(tmp_path):
    from dentsync.db import LocalStorage

    return LocalStorage(tmp_path / "data")


@pytest.fixture
def store(storage, state):
    from dentsync.state import Store

    return Store(storage=storage, initial_state=state)


@pytest.fixture
def auth_provider():
    return FakeAuthProvider()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the configuration at a temporary data directory."""
    from dentsync.config import reset_config

    path = tmp_path / "clinic"
    monkeypatch.setenv("DENTSYNC_DATA_DIR", str(path))
    monkeypatch.delenv("DENTSYNC_STORAGE_KEY", raising=False)
    reset_config()
    yield path
    reset_config()
