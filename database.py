import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

import settings

logger = logging.getLogger(__name__)

client: Optional[MongoClient] = None
db: Optional[Database] = None

if settings.DATABASE_URL:
    client = MongoClient(settings.DATABASE_URL)
    db = client[settings.DATABASE_NAME]
else:
    logger.warning("DATABASE_URL is not set, the API will answer 503 to data requests")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_document(collection_name: str, data: BaseModel, database: Optional[Database] = None) -> str:
    database = database if database is not None else db
    document = data.model_dump()
    document["created_at"] = document["updated_at"] = now_utc()
    result = database[collection_name].insert_one(document)
    logger.debug("Inserted %s %s", collection_name, result.inserted_id)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None,
                  sort: Optional[List[Tuple[str, int]]] = None,
                  database: Optional[Database] = None) -> List[Dict[str, Any]]:
    database = database if database is not None else db
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    return list(cursor)


def upsert_document(collection_name: str, document_id: ObjectId, data: BaseModel,
                    database: Optional[Database] = None) -> str:
    """Create or fully replace the document stored under a caller-chosen id."""
    database = database if database is not None else db
    document = data.model_dump()
    document["created_at"] = document["updated_at"] = now_utc()
    database[collection_name].replace_one({"_id": document_id}, document, upsert=True)
    logger.debug("Upserted %s %s", collection_name, document_id)
    return str(document_id)


def get_db() -> Database:
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return db
