"""
State container tests for DentSync.
"""

import sys
import json
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest


class TestStore:
    """Dispatch, persistence and subscribers."""

    def test_starts_from_defaults_without_storage(self):
        from dentsync.models import AppState
        from dentsync.state import Store

        assert Store().state == AppState()

    def test_loads_from_storage_once(self, storage, state):
        from dentsync.db import save_state
        from dentsync.state import Store

        save_state(storage, state, "dentSyncData")
        store = Store(storage=storage)

        assert store.state.get_patient("p1") == state.get_patient("p1")
        assert store.state.is_auth_loading is True

    def test_dispatch_saves_new_state(self, store, storage):
        from dentsync.state import UpdateSettings

        new_state = store.dispatch(UpdateSettings(clinic_name="Smile Care"))

        assert new_state is store.state
        assert json.loads(storage.get_item("dentSyncData"))["clinicName"] == "Smile Care"

    def test_noop_dispatch_neither_saves_nor_notifies(self, store, storage):
        from dentsync.state import DeleteDocument

        seen = []
        store.subscribe(seen.append)
        before = store.state

        after = store.dispatch(DeleteDocument(patient_id="p1", document_id="missing"))

        assert after is before
        assert seen == []
        assert storage.get_item("dentSyncData") is None

    def test_listeners_notified_in_order(self, store):
        from dentsync.state import UpdateSettings

        calls = []
        store.subscribe(lambda s: calls.append(("first", s.clinic_name)))
        store.subscribe(lambda s: calls.append(("second", s.clinic_name)))

        store.dispatch(UpdateSettings(clinic_name="Smile Care"))

        assert calls == [("first", "Smile Care"), ("second", "Smile Care")]

    def test_unsubscribe(self, store):
        from dentsync.state import UpdateSettings

        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.dispatch(UpdateSettings(clinic_name="One"))
        unsubscribe()
        unsubscribe()
        store.dispatch(UpdateSettings(clinic_name="Two"))

        assert [s.clinic_name for s in seen] == ["One"]

    def test_failing_listener_does_not_stop_others(self, store, caplog):
        from dentsync.state import UpdateSettings

        def broken(state):
            raise RuntimeError("boom")

        seen = []
        store.subscribe(broken)
        store.subscribe(seen.append)

        store.dispatch(UpdateSettings(clinic_name="Smile Care"))

        assert store.state.clinic_name == "Smile Care"
        assert len(seen) == 1
        assert "State listener" in caplog.text

    def test_dispatch_from_listener_is_queued(self, store):
        from dentsync.models import BillingStatus
        from dentsync.state import UpdateBilling, UpdateSettings

        order = []

        def on_change(state):
            order.append(state.clinic_name)
            if state.clinic_name == "Smile Care" and not state.transactions:
                store.dispatch(UpdateBilling(patient_id="p1", billing_id="b1", status=BillingStatus.PAID))

        store.subscribe(on_change)
        store.subscribe(lambda s: order.append(len(s.transactions)))

        store.dispatch(UpdateSettings(clinic_name="Smile Care"))

        # Both listeners see the first state before the queued action runs
        assert order == ["Smile Care", 0, "Smile Care", 1]
        assert len(store.state.transactions) == 1

    def test_save_failure_keeps_in_memory_state(self, tmp_path, state, caplog):
        from dentsync.db import LocalStorage
        from dentsync.state import Store, UpdateSettings

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = Store(storage=LocalStorage(blocker), initial_state=state)

        store.dispatch(UpdateSettings(clinic_name="Smile Care"))

        assert store.state.clinic_name == "Smile Care"
        assert "Failed to save state" in caplog.text

    def test_from_config(self, data_dir):
        from dentsync.state import Store, UpdateSettings

        store = Store.from_config()
        store.dispatch(UpdateSettings(clinic_name="Configured"))

        assert (data_dir / "dentSyncData.json").exists()
        assert Store.from_config().state.clinic_name == "Configured"

    def test_failing_reducer_drops_queued_actions(self, state):
        from dentsync.state import Store, UpdateSettings, reduce

        def fragile(current, action):
            if action.clinic_name == "boom":
                raise RuntimeError("reducer failed")
            return reduce(current, action)

        store = Store(initial_state=state, reducer=fragile)

        def on_change(new_state):
            if new_state.clinic_name == "First" and not new_state.clinic_address:
                store.dispatch(UpdateSettings(clinic_name="boom"))
                store.dispatch(UpdateSettings(clinic_name="Queued"))

        store.subscribe(on_change)

        with pytest.raises(RuntimeError):
            store.dispatch(UpdateSettings(clinic_name="First"))
        assert store.state.clinic_name == "First"

        # A later dispatch does not replay what was queued behind the failure
        store.dispatch(UpdateSettings(clinic_address="MG Road"))
        assert store.state.clinic_name == "First"
        assert store.state.clinic_address == "MG Road"


class TestConfig:
    """Environment configuration."""

    def test_defaults(self, monkeypatch):
        from dentsync.config import DEFAULT_DATA_DIR, DentSyncConfig

        for name in ("DENTSYNC_DATA_DIR", "DENTSYNC_STORAGE_KEY", "DENTSYNC_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = DentSyncConfig()

        assert config.data_dir == DEFAULT_DATA_DIR
        assert config.storage_key == "dentSyncData"
        assert config.log_level_number == 30

    def test_unknown_log_level_falls_back(self, monkeypatch):
        from dentsync.config import DentSyncConfig

        monkeypatch.setenv("DENTSYNC_LOG_LEVEL", "chatty")

        assert DentSyncConfig().log_level_number == 30

    def test_data_dir_must_be_a_directory(self, tmp_path, monkeypatch):
        from dentsync.config import DentSyncConfig

        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        monkeypatch.setenv("DENTSYNC_DATA_DIR", str(blocker))

        with pytest.raises(ValueError):
            DentSyncConfig().validate()
