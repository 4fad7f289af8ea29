"""
Users API — User Service Unit Tests
====================================

What:  Tests for UserService against a mocked Motor collection.
Why:   The service owns the per-operation error mapping; each operation's
       not-found, malformed-id and driver-error paths are checked here.
How:   Uses the mock_collection fixture (no real MongoDB).

What we test:
    ✅ Driver calls and arguments for every operation
    ✅ Serialization of ObjectId / datetime values
    ✅ Missing document → NotFoundError
    ✅ Malformed id → DatabaseError (get, delete) or ValidationError (update)
    ✅ Driver errors → operation's error kind with serialized driver error
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from bson.errors import InvalidDocument
from pymongo import ReturnDocument
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError, WriteError

from users_api.exceptions import DatabaseError, NotFoundError, ValidationError
from users_api.schemas.user import UserPayload
from users_api.services.user_service import UserService, serialize_user


class TestSerializeUser:

    def test_id_first_and_stringified(self):
        oid = ObjectId()
        result = serialize_user({"name": "Alice", "_id": oid, "age": 30})
        assert list(result) == ["_id", "name", "age"]
        assert result["_id"] == str(oid)

    def test_nested_values_become_json_native(self):
        oid, ref = ObjectId(), ObjectId()
        created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        result = serialize_user({"_id": oid, "manager": ref, "created_at": created})
        assert result["manager"] == str(ref)
        assert result["created_at"] == "2024-01-15T12:00:00+00:00"


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_create_inserts_sent_fields(self, mock_collection):
        oid = ObjectId()
        mock_collection.insert_one.return_value.inserted_id = oid

        result = await UserService(mock_collection).create_user(
            UserPayload(name="Alice", age=30)
        )

        mock_collection.insert_one.assert_awaited_once()
        inserted = mock_collection.insert_one.await_args.args[0]
        assert inserted["name"] == "Alice"
        assert inserted["age"] == 30
        assert "email" not in inserted
        assert result == {"_id": str(oid), "name": "Alice", "age": 30}

    @pytest.mark.asyncio
    async def test_create_rejected_by_store_raises_validation_error(self, mock_collection):
        mock_collection.insert_one.side_effect = WriteError(
            "Document failed validation", code=121
        )

        with pytest.raises(ValidationError) as exc_info:
            await UserService(mock_collection).create_user(UserPayload(name="Alice"))

        assert exc_info.value.context["name"] == "WriteError"
        assert exc_info.value.context["code"] == 121


class TestListUsers:

    @pytest.mark.asyncio
    async def test_list_returns_all_documents(self, mock_collection):
        docs = [{"_id": ObjectId(), "name": f"user-{i}"} for i in range(3)]
        mock_collection.find.return_value.to_list.return_value = docs

        result = await UserService(mock_collection).list_users()

        mock_collection.find.assert_called_once_with({})
        assert [u["name"] for u in result] == ["user-0", "user-1", "user-2"]
        assert all(isinstance(u["_id"], str) for u in result)

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_collection):
        assert await UserService(mock_collection).list_users() == []

    @pytest.mark.asyncio
    async def test_list_store_error_raises_validation_error(self, mock_collection):
        mock_collection.find.return_value.to_list.side_effect = (
            ServerSelectionTimeoutError("no servers available")
        )

        with pytest.raises(ValidationError) as exc_info:
            await UserService(mock_collection).list_users()

        assert exc_info.value.context["name"] == "ServerSelectionTimeoutError"


class TestGetUser:

    def setup_method(self):
        self.oid = ObjectId()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_collection):
        mock_collection.find_one.return_value = {"_id": self.oid, "name": "Alice"}

        result = await UserService(mock_collection).get_user(str(self.oid))

        mock_collection.find_one.assert_awaited_once_with({"_id": self.oid})
        assert result == {"_id": str(self.oid), "name": "Alice"}

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, mock_collection):
        with pytest.raises(NotFoundError):
            await UserService(mock_collection).get_user(str(self.oid))

    @pytest.mark.asyncio
    async def test_get_malformed_id_raises_database_error(self, mock_collection):
        with pytest.raises(DatabaseError, match="not a valid user identifier"):
            await UserService(mock_collection).get_user("not-an-id")
        mock_collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_store_error_raises_database_error(self, mock_collection):
        mock_collection.find_one.side_effect = OperationFailure("boom", code=2)

        with pytest.raises(DatabaseError) as exc_info:
            await UserService(mock_collection).get_user(str(self.oid))

        assert exc_info.value.context["name"] == "OperationFailure"
        assert exc_info.value.context["code"] == 2
        assert "boom" in exc_info.value.context["message"]


class TestUpdateUser:

    def setup_method(self):
        self.oid = ObjectId()

    @pytest.mark.asyncio
    async def test_update_sets_only_sent_fields(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {
            "_id": self.oid, "name": "Alice", "age": 31,
        }

        result = await UserService(mock_collection).update_user(
            str(self.oid), UserPayload(age=31)
        )

        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"_id": self.oid},
            {"$set": {"age": 31}},
            return_document=ReturnDocument.AFTER,
        )
        assert result == {"_id": str(self.oid), "name": "Alice", "age": 31}

    @pytest.mark.asyncio
    async def test_update_with_empty_payload_returns_current(self, mock_collection):
        mock_collection.find_one.return_value = {"_id": self.oid, "name": "Alice"}

        result = await UserService(mock_collection).update_user(str(self.oid), UserPayload())

        mock_collection.find_one_and_update.assert_not_awaited()
        assert result["name"] == "Alice"

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, mock_collection):
        with pytest.raises(NotFoundError):
            await UserService(mock_collection).update_user(
                str(self.oid), UserPayload(age=31)
            )

    @pytest.mark.asyncio
    async def test_update_malformed_id_raises_validation_error(self, mock_collection):
        with pytest.raises(ValidationError):
            await UserService(mock_collection).update_user("123", UserPayload(age=31))

    @pytest.mark.asyncio
    async def test_update_rejected_by_store_raises_validation_error(self, mock_collection):
        mock_collection.find_one_and_update.side_effect = WriteError(
            "Document failed validation", code=121
        )

        with pytest.raises(ValidationError):
            await UserService(mock_collection).update_user(
                str(self.oid), UserPayload(age=31)
            )


class TestDeleteUser:

    def setup_method(self):
        self.oid = ObjectId()

    @pytest.mark.asyncio
    async def test_delete_returns_removed_document(self, mock_collection):
        mock_collection.find_one_and_delete.return_value = {"_id": self.oid, "name": "Alice"}

        result = await UserService(mock_collection).delete_user(str(self.oid))

        mock_collection.find_one_and_delete.assert_awaited_once_with({"_id": self.oid})
        assert result == {"_id": str(self.oid), "name": "Alice"}

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, mock_collection):
        with pytest.raises(NotFoundError):
            await UserService(mock_collection).delete_user(str(self.oid))

    @pytest.mark.asyncio
    async def test_delete_malformed_id_raises_database_error(self, mock_collection):
        with pytest.raises(DatabaseError):
            await UserService(mock_collection).delete_user("zzz")


class TestStoreErrorCoverage:
    """Client-side encoding failures and delete failures map like server errors."""

    def setup_method(self):
        self.oid = ObjectId()

    @pytest.mark.asyncio
    async def test_create_oversized_integer_raises_validation_error(self, mock_collection):
        mock_collection.insert_one.side_effect = OverflowError(
            "MongoDB can only handle up to 8-byte ints"
        )

        with pytest.raises(ValidationError) as exc_info:
            await UserService(mock_collection).create_user(
                UserPayload.model_validate({"n": 10**30})
            )

        assert exc_info.value.context["name"] == "OverflowError"

    @pytest.mark.asyncio
    async def test_update_unencodable_key_raises_validation_error(self, mock_collection):
        mock_collection.find_one_and_update.side_effect = InvalidDocument(
            "Key names must not contain the NULL byte"
        )

        with pytest.raises(ValidationError) as exc_info:
            await UserService(mock_collection).update_user(
                str(self.oid), UserPayload.model_validate({"bad\x00key": 1})
            )

        assert exc_info.value.context["name"] == "InvalidDocument"

    @pytest.mark.asyncio
    async def test_delete_store_error_raises_database_error(self, mock_collection):
        mock_collection.find_one_and_delete.side_effect = ServerSelectionTimeoutError(
            "no servers available"
        )

        with pytest.raises(DatabaseError) as exc_info:
            await UserService(mock_collection).delete_user(str(self.oid))

        assert exc_info.value.context["name"] == "ServerSelectionTimeoutError"
