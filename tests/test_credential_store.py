"""Unit tests for the JSON file credential store."""

import sys
import os
import json
import shutil
import tempfile
from datetime import datetime
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../src"))

from md2gslides.auth.client_config import ClientConfig
from md2gslides.auth.credential_store import CredentialRecord, JsonFileCredentialStore
from md2gslides.utils.errors import StorageError


def make_record(token: str = "access-1") -> CredentialRecord:
    return CredentialRecord(
        access_token=token,
        refresh_token="refresh-1",
        expiry=datetime(2030, 1, 1, 12, 30, 15, 250000),
        scope="https://www.googleapis.com/auth/presentations https://www.googleapis.com/auth/drive",
        token_type="Bearer",
    )


class TestCredentialRecord:
    """Tests for CredentialRecord conversions."""

    def test_from_token_response(self):
        record = CredentialRecord.from_token_response(
            {
                "access_token": "A",
                "refresh_token": "R",
                "expires_at": 1893456000.0,
                "scope": ["scope-a", "scope-b"],
                "token_type": "Bearer",
            }
        )
        assert record.access_token == "A"
        assert record.refresh_token == "R"
        assert record.expiry == datetime(2030, 1, 1)
        assert record.scope == "scope-a scope-b"
        assert record.token_type == "Bearer"

    def test_from_token_response_minimal(self):
        record = CredentialRecord.from_token_response({"access_token": "A"})
        assert record == CredentialRecord(access_token="A")

    def test_from_dict_requires_access_token(self):
        with pytest.raises(ValueError):
            CredentialRecord.from_dict({"refresh_token": "R"})

    def test_from_dict_converts_aware_expiry_to_naive_utc(self):
        record = CredentialRecord.from_dict(
            {"access_token": "A", "expiry": "2030-01-01T14:00:00+02:00"}
        )
        assert record.expiry == datetime(2030, 1, 1, 12, 0, 0)
        assert record.expiry.tzinfo is None

    def test_to_credentials(self):
        client = ClientConfig("id1", "sec1")
        credentials = make_record().to_credentials(client)
        assert credentials.token == "access-1"
        assert credentials.refresh_token == "refresh-1"
        assert credentials.client_id == "id1"
        assert credentials.client_secret == "sec1"
        assert credentials.token_uri == "https://oauth2.googleapis.com/token"
        assert list(credentials.scopes) == [
            "https://www.googleapis.com/auth/presentations",
            "https://www.googleapis.com/auth/drive",
        ]
        assert credentials.valid


class TestJsonFileCredentialStore:
    """Tests for JsonFileCredentialStore."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.cache_path = os.path.join(self.temp_dir, "nested", "credentials.json")

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def write_cache(self, content: str) -> None:
        os.makedirs(os.path.dirname(self.cache_path), exist_ok=True)
        with open(self.cache_path, "w") as f:
            f.write(content)

    def test_nothing_created_before_first_access(self):
        JsonFileCredentialStore(self.cache_path)
        assert not os.path.exists(os.path.dirname(self.cache_path))

    def test_load_creates_directory_and_empty_file(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.load()
        with open(self.cache_path) as f:
            assert json.load(f) == {}
        assert store.users() == []

    def test_round_trip(self):
        store = JsonFileCredentialStore(self.cache_path)
        record = make_record()
        store.put("user@example.com", record)
        store.persist()

        fresh = JsonFileCredentialStore(self.cache_path)
        fresh.load()
        assert fresh.get("user@example.com") == record

    def test_round_trip_without_optional_fields(self):
        store = JsonFileCredentialStore(self.cache_path)
        record = CredentialRecord(access_token="only-access")
        store.put("default", record)
        store.persist()

        fresh = JsonFileCredentialStore(self.cache_path)
        assert fresh.get("default") == record

    def test_load_is_idempotent(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.put("a", make_record("token-a"))
        store.persist()

        store.load()
        first = {user: store.get(user) for user in store.users()}
        store.load()
        second = {user: store.get(user) for user in store.users()}
        assert first == second

    def test_load_reads_changes_made_by_another_store(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.load()

        other = JsonFileCredentialStore(self.cache_path)
        other.put("b", make_record("token-b"))
        other.persist()

        assert store.get("b") is None
        store.load()
        assert store.get("b").access_token == "token-b"

    def test_put_replaces_existing_record(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.put("default", make_record("old"))
        store.put("default", make_record("new"))
        store.persist()

        with open(self.cache_path) as f:
            data = json.load(f)
        assert list(data) == ["default"]
        assert data["default"]["access_token"] == "new"

    def test_put_does_not_persist(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.put("default", make_record())

        with open(self.cache_path) as f:
            assert json.load(f) == {}

    def test_invalid_json_raises(self):
        self.write_cache("{not json")
        with pytest.raises(StorageError) as exc_info:
            JsonFileCredentialStore(self.cache_path).load()
        assert exc_info.value.path == self.cache_path

    def test_non_object_json_raises(self):
        self.write_cache("[1, 2, 3]")
        with pytest.raises(StorageError):
            JsonFileCredentialStore(self.cache_path).load()

    def test_record_without_access_token_raises(self):
        self.write_cache(json.dumps({"default": {"refresh_token": "R"}}))
        with pytest.raises(StorageError):
            JsonFileCredentialStore(self.cache_path).load()

    def test_persist_failure_keeps_previous_file(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.put("default", make_record("good"))
        store.persist()

        store.put("default", make_record("lost"))
        with patch(
            "md2gslides.auth.credential_store.os.replace",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(StorageError):
                store.persist()

        with open(self.cache_path) as f:
            assert json.load(f)["default"]["access_token"] == "good"
        assert os.listdir(os.path.dirname(self.cache_path)) == ["credentials.json"]

    def test_persist_into_removed_directory_raises(self):
        store = JsonFileCredentialStore(self.cache_path)
        store.put("default", make_record())
        shutil.rmtree(os.path.dirname(self.cache_path))

        with pytest.raises(StorageError) as exc_info:
            store.persist()
        assert exc_info.value.path == self.cache_path

    def test_in_memory_store(self):
        store = JsonFileCredentialStore()
        assert store.get("default") is None

        store.put("default", make_record())
        store.persist()
        store.load()

        assert store.get("default") == make_record()
        assert store.users() == ["default"]
        assert os.listdir(self.temp_dir) == []
