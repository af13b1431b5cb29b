# tests/test_credential_store.py
"""Tests for PIN hashing, PIN/identifier login and PIN uniqueness."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from cleanup_tracker.errors import BadInput, Conflict, Forbidden, InvalidCredentials, NotFound
from cleanup_tracker.models.enums import Role
from cleanup_tracker.services import credential_store


class TestValidatePin:
    @pytest.mark.parametrize("pin", ["1234", "12345678", "0000"])
    def test_accepts_4_to_8_digits(self, pin):
        assert credential_store.validate_pin(pin) == pin

    @pytest.mark.parametrize("pin", ["", "123", "123456789", "12a4", " 1234", None, 1234])
    def test_rejects_everything_else(self, pin):
        with pytest.raises(BadInput):
            credential_store.validate_pin(pin)


class TestHashing:
    def test_hash_is_not_the_pin(self):
        pin_hash = credential_store.hash_pin("4321")
        assert pin_hash != "4321"
        assert credential_store.verify_pin("4321", pin_hash)
        assert not credential_store.verify_pin("1234", pin_hash)

    def test_same_pin_hashes_differently(self):
        assert credential_store.hash_pin("4321") != credential_store.hash_pin("4321")

    def test_malformed_hash_does_not_verify(self):
        assert not credential_store.verify_pin("4321", "not-a-bcrypt-hash")

    def test_missing_hash_does_not_verify(self):
        assert not credential_store.verify_pin("4321", None)


class TestResolve:
    def test_resolve_by_pin(self, db, roster):
        user = credential_store.resolve_by_pin(db, "1716")
        assert user.employee_number == "DET001"
        assert user.last_login is not None

    def test_resolve_by_unknown_pin(self, db, roster):
        with pytest.raises(InvalidCredentials):
            credential_store.resolve_by_pin(db, "9999")

    def test_resolve_by_malformed_pin(self, db, roster):
        with pytest.raises(BadInput):
            credential_store.resolve_by_pin(db, "12")

    def test_inactive_user_not_resolved_by_pin(self, db, roster):
        roster["DET002"].is_active = False
        db.commit()
        with pytest.raises(InvalidCredentials):
            credential_store.resolve_by_pin(db, "1709")

    @pytest.mark.parametrize("identifier", ["det001", "DET001", "detailer-001"])
    def test_resolve_by_identifier(self, db, roster, identifier):
        assert credential_store.resolve_by_identifier(db, identifier).name == "Alfred"

    def test_resolve_by_username_is_case_insensitive(self, db, roster):
        assert credential_store.resolve_by_identifier(db, "MANAGER").role == Role.MANAGER

    def test_resolve_unknown_identifier(self, db, roster):
        with pytest.raises(NotFound):
            credential_store.resolve_by_identifier(db, "NOBODY")

    def test_inactive_user_not_resolved_by_identifier(self, db, roster):
        alfred = roster["DET001"]
        alfred.is_active = False
        db.commit()

        with pytest.raises(Forbidden):
            credential_store.resolve_by_identifier(db, "DET001")
        db.refresh(alfred)
        assert alfred.last_login is None

    def test_resolve_by_identifier_checks_pin(self, db, roster):
        assert credential_store.resolve_by_identifier(db, "DET001", pin="1716").name == "Alfred"
        with pytest.raises(InvalidCredentials):
            credential_store.resolve_by_identifier(db, "DET001", pin="1709")


class TestAuthenticate:
    def test_pin_only(self, db, roster):
        assert credential_store.authenticate(db, pin="2001").employee_number == "SALES001"

    def test_pin_in_identifier_field(self, db, roster):
        assert credential_store.authenticate(db, pin=None, identifier="2001").employee_number == "SALES001"

    def test_identifier_equal_to_pin_is_pin_only(self, db, roster):
        assert credential_store.authenticate(db, pin="1701", identifier="1701").role == Role.MANAGER

    def test_identifier_and_pin(self, db, roster):
        assert credential_store.authenticate(db, pin="1716", identifier="DET001").name == "Alfred"

    def test_identifier_with_someone_elses_pin(self, db, roster):
        with pytest.raises(InvalidCredentials):
            credential_store.authenticate(db, pin="1709", identifier="DET001")

    def test_unknown_identifier_is_invalid_credentials(self, db, roster):
        with pytest.raises(InvalidCredentials):
            credential_store.authenticate(db, pin="1716", identifier="NOBODY")

    def test_inactive_user_pin_only_is_invalid_credentials(self, db, roster):
        roster["DET001"].is_active = False
        db.commit()
        with pytest.raises(InvalidCredentials):
            credential_store.authenticate(db, pin="1716")

    def test_missing_pin(self, db, roster):
        with pytest.raises(BadInput):
            credential_store.authenticate(db, pin=None, identifier=None)

    def test_inactive_user_with_identifier_is_forbidden(self, db, roster):
        roster["DET001"].is_active = False
        db.commit()
        with pytest.raises(Forbidden):
            credential_store.authenticate(db, pin="1716", identifier="DET001")


class TestSetPin:
    def test_change_pin(self, db, roster):
        alfred = roster["DET001"]
        credential_store.set_pin(db, alfred, "5555")
        assert credential_store.resolve_by_pin(db, "5555").id == alfred.id
        with pytest.raises(InvalidCredentials):
            credential_store.resolve_by_pin(db, "1716")

    def test_pin_held_by_another_user_conflicts(self, db, roster):
        with pytest.raises(Conflict):
            credential_store.set_pin(db, roster["DET001"], "1709")

    def test_re_setting_own_pin_is_allowed(self, db, roster):
        credential_store.set_pin(db, roster["DET001"], "1716")

    def test_pin_of_deactivated_user_still_reserved(self, db, roster):
        roster["DET002"].is_active = False
        db.commit()
        assert credential_store.is_pin_in_use(db, "1709")
        with pytest.raises(Conflict):
            credential_store.set_pin(db, roster["DET001"], "1709")
