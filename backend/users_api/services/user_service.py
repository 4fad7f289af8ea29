"""
Users API — User Service (Store Adapter)
=========================================

What:  One method per endpoint, each performing exactly one driver call
       against the users collection.
Why:   Keeps driver details (ObjectId parsing, Motor calls, PyMongo errors)
       out of the route layer.
How:   Receives the collection in its constructor; converts stored documents
       into JSON-ready dicts and driver exceptions into application errors.
Who:   Constructed per request by the route dependency; calls Motor.

Error Mapping (per operation):
    ┌──────────┬───────────────────┬──────────────────────────────┐
    │ Method   │ Missing document  │ Malformed id / driver error  │
    ├──────────┼───────────────────┼──────────────────────────────┤
    │ create   │        —          │ ValidationError (400)        │
    │ list     │        —          │ ValidationError (400)        │
    │ get      │ NotFoundError     │ DatabaseError (500)          │
    │ update   │ NotFoundError     │ ValidationError (400)        │
    │ delete   │ NotFoundError     │ DatabaseError (500)          │
    └──────────┴───────────────────┴──────────────────────────────┘

    "Driver error" includes documents the driver cannot encode to BSON.

Design Decision:
    UserService is stateless apart from the injected collection. There are
    no retries and no transactions; every failure is terminal for the
    request that hit it.
"""

import logging
from typing import Any, Dict, List, Type

from bson import ObjectId
from bson.errors import BSONError, InvalidId
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from users_api.exceptions import (
    DatabaseError,
    NotFoundError,
    UsersApiError,
    ValidationError,
    describe_store_error,
)
from users_api.schemas.user import UserPayload

logger = logging.getLogger(__name__)

# Server-side failures plus client-side BSON encoding failures: an integer
# wider than 64 bits raises OverflowError, a NUL in a key raises InvalidDocument.
STORE_ERRORS = (PyMongoError, BSONError, OverflowError)


def serialize_user(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a stored document into JSON-native values.

    `_id` is moved to the front; ObjectIds anywhere in the document become
    hex strings and datetimes become ISO 8601 strings.
    """
    ordered = {"_id": document["_id"]}
    ordered.update((k, v) for k, v in document.items() if k != "_id")
    return jsonable_encoder(ordered, custom_encoder={ObjectId: str})


class UserService:
    """
    Store operations for the users collection.

    Args:
        collection: Motor collection injected by the route layer
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def create_user(self, payload: UserPayload) -> Dict[str, Any]:
        """Insert the payload as a new document and return it with its `_id`."""
        document = payload.to_document()
        try:
            result = await self.collection.insert_one(document)
        except STORE_ERRORS as e:
            logger.warning("Insert rejected by store: %s", str(e))
            raise ValidationError(
                message="User could not be created",
                context=describe_store_error(e),
            ) from e

        document["_id"] = result.inserted_id
        logger.info("User created: %s", result.inserted_id)
        return serialize_user(document)

    async def list_users(self) -> List[Dict[str, Any]]:
        """Every document in the collection, in store order."""
        try:
            documents = await self.collection.find({}).to_list(length=None)
        except STORE_ERRORS as e:
            logger.warning("Listing users failed: %s", str(e))
            raise ValidationError(
                message="Users could not be listed",
                context=describe_store_error(e),
            ) from e
        return [serialize_user(doc) for doc in documents]

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        oid = self._parse_id(user_id, DatabaseError)
        try:
            document = await self.collection.find_one({"_id": oid})
        except STORE_ERRORS as e:
            logger.error("Lookup of user %s failed: %s", user_id, str(e))
            raise DatabaseError(
                message="User could not be retrieved",
                context=describe_store_error(e),
            ) from e

        if document is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return serialize_user(document)

    async def update_user(self, user_id: str, payload: UserPayload) -> Dict[str, Any]:
        """
        Apply the sent fields with `$set` and return the document after the update.

        An empty payload changes nothing; the current document is returned
        (MongoDB rejects an empty `$set`).
        """
        oid = self._parse_id(user_id, ValidationError)
        changes = payload.to_document()
        try:
            if changes:
                document = await self.collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                document = await self.collection.find_one({"_id": oid})
        except STORE_ERRORS as e:
            logger.warning("Update of user %s rejected: %s", user_id, str(e))
            raise ValidationError(
                message="User could not be updated",
                context=describe_store_error(e),
            ) from e

        if document is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        logger.info("User updated: %s (%s)", user_id, ", ".join(changes) or "no fields")
        return serialize_user(document)

    async def delete_user(self, user_id: str) -> Dict[str, Any]:
        """Remove the document and return it as it was before deletion."""
        oid = self._parse_id(user_id, DatabaseError)
        try:
            document = await self.collection.find_one_and_delete({"_id": oid})
        except STORE_ERRORS as e:
            logger.error("Delete of user %s failed: %s", user_id, str(e))
            raise DatabaseError(
                message="User could not be deleted",
                context=describe_store_error(e),
            ) from e

        if document is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        logger.info("User deleted: %s", user_id)
        return serialize_user(document)

    @staticmethod
    def _parse_id(user_id: str, error_cls: Type[UsersApiError]) -> ObjectId:
        """Cast a path identifier to ObjectId, raising the caller's error kind."""
        try:
            return ObjectId(user_id)
        except (InvalidId, TypeError) as e:
            raise error_cls(
                message=f"'{user_id}' is not a valid user identifier",
                context=describe_store_error(e),
            ) from e
