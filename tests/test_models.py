"""Tests for the request and storage models."""
import pytest
from pydantic import ValidationError

from users_api.models import StoredUser, UserRecord


class TestUserRecord:
    def test_keeps_only_sent_fields(self):
        record = UserRecord.model_validate({"name": "Cami"})
        assert record.sent_fields() == {"name": "Cami"}

    def test_passes_unknown_fields_through(self):
        record = UserRecord.model_validate({"id": 1, "name": "Camilo", "password": "x", "role": "ADMIN"})
        assert record.sent_fields() == {"id": 1, "name": "Camilo", "password": "x", "role": "ADMIN"}

    def test_values_are_not_coerced(self):
        record = UserRecord.model_validate({"id": "5", "name": 42})
        assert record.sent_fields() == {"id": "5", "name": 42}

    def test_explicit_null_counts_as_sent(self):
        assert UserRecord.model_validate({"email": None}).sent_fields() == {"email": None}


class TestStoredUser:
    def test_dump_keeps_extras(self):
        user = StoredUser.model_validate({"id": 1, "name": "Camilo", "email": "camilo@example.com", "role": "USER"})
        assert user.model_dump() == {"id": 1, "name": "Camilo", "email": "camilo@example.com", "role": "USER"}

    @pytest.mark.parametrize("bad_id", ["1", 1.0, True])
    def test_id_must_be_an_int(self, bad_id):
        with pytest.raises(ValidationError):
            StoredUser.model_validate({"id": bad_id, "name": "Camilo", "email": "camilo@example.com"})
