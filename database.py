from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import structlog
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import Settings
from errors import Conflict, InvalidInput, NotFound, StoreError, Unauthorized

logger = structlog.get_logger()

USERS = "users"
MOODS = "moods"


def connect(settings: Settings) -> MongoClient:
    # tz_aware so created_at comes back comparable with datetime.now(timezone.utc)
    return MongoClient(settings.mongo_uri(), tz_aware=True)


def ensure_indexes(db: Database) -> None:
    """Create the indexes the stores rely on. Safe to run on every startup."""
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[MOODS].create_index([("email", ASCENDING), ("created_at", DESCENDING)])
    db[MOODS].create_index([("triggers", ASCENDING)])


def create_document(col: Collection, data: Dict[str, Any]) -> Dict[str, Any]:
    payload = {**data, "created_at": datetime.now(timezone.utc)}
    result = col.insert_one(payload)
    payload["_id"] = result.inserted_id
    return payload


class AccountStore:
    """Email/password pairs for signup and login.

    Passwords are stored and compared as plaintext, exactly as received.
    This is insecure and must be replaced by a salted hash before any
    production use.
    """

    def __init__(self, db: Database):
        self.users = db[USERS]

    def register(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise InvalidInput("Email and password required")
        try:
            # fast path only; the unique index on email is what actually decides
            if self.users.find_one({"email": email}) is not None:
                raise Conflict("User already exists")
            doc = create_document(self.users, {"email": email, "password": password})
        except DuplicateKeyError:
            raise Conflict("User already exists")
        except PyMongoError as e:
            logger.error("auth.signup_failed", email=email, error=str(e))
            raise StoreError("Server error") from e
        logger.info("auth.signup", email=email)
        return {"email": doc["email"], "created_at": doc["created_at"]}

    def verify(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise InvalidInput("Email and password required")
        try:
            user = self.users.find_one({"email": email})
        except PyMongoError as e:
            logger.error("auth.login_failed", email=email, error=str(e))
            raise StoreError("Server error") from e
        if user is None:
            raise NotFound("User not found. Please sign up first.")
        if user.get("password") != password:
            raise Unauthorized("Incorrect password")
        return {"email": user["email"]}


class EntryStore:
    def __init__(self, db: Database):
        self.moods = db[MOODS]

    def save(self, email: Optional[str], mood: Optional[str], triggers: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        if not email or not mood:
            raise InvalidInput("Email and mood are required")
        data = {"email": email, "mood": mood, "triggers": list(triggers or [])}
        try:
            doc = create_document(self.moods, data)
        except PyMongoError as e:
            logger.error("mood.save_failed", email=email, error=str(e))
            raise StoreError("Error saving mood") from e
        logger.info("mood.saved", email=email, mood=mood, triggers=len(doc["triggers"]))
        return doc

    def find(
        self,
        email: str,
        since: datetime,
        until: Optional[datetime] = None,
        triggers: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Entries of ``email`` created in [since, until], newest first.

        With ``triggers``, only entries sharing at least one trigger with it.
        """
        created: Dict[str, Any] = {"$gte": since}
        if until is not None:
            created["$lte"] = until
        q: Dict[str, Any] = {"email": email, "created_at": created}
        wanted = list(triggers or [])
        if wanted:
            q["triggers"] = {"$in": wanted}

        projection = {"_id": 0, "mood": 1, "triggers": 1, "created_at": 1}
        try:
            cursor = self.moods.find(q, projection).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            return list(cursor)
        except PyMongoError as e:
            logger.error("mood.history_failed", email=email, error=str(e))
            raise StoreError("Server error while retrieving mood history") from e
