"""
MongoDB repositories for the five resources.

Every query skips soft-deleted documents. List queries are sorted with the
client's orderBy compiled against the resource's property mapping and paged
from a single read, so the total count and the page come from the same data.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple, Type

from bson import ObjectId
from pydantic import BaseModel
from pymongo.database import Database

from database import create_document, get_documents, now_utc, upsert_document
from dtos import HallDto, MovieDto, SeatDto, ShowtimeDto, TicketDto
from pagination import Page, RequestParameters
from property_mapping import property_mappings
from schemas import Hall, Movie, Seat, Showtime, Ticket
from sorting import compile_order_by, to_mongo_sort

logger = logging.getLogger(__name__)


class Repository:
    collection: str
    dto_type: Type[BaseModel]
    storage_type: Type[BaseModel]
    search_fields: Tuple[str, ...] = ()

    def __init__(self, database: Database):
        self.db = database

    def _active(self, **scope: Any) -> Dict[str, Any]:
        return {"is_deleted": {"$ne": True}, **scope}

    def _search(self, search_query: Optional[str]) -> Dict[str, Any]:
        if not search_query or not search_query.strip() or not self.search_fields:
            return {}
        pattern = re.escape(search_query.strip())
        return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in self.search_fields]}

    def exists(self, document_id: ObjectId, **scope: Any) -> bool:
        return self.get(document_id, **scope) is not None

    def get(self, document_id: ObjectId, **scope: Any) -> Optional[Dict[str, Any]]:
        return self.db[self.collection].find_one(self._active(_id=document_id, **scope))

    def owned_elsewhere(self, document_id: ObjectId, **scope: Any) -> bool:
        """True when the id is already stored, deleted or not, under a different parent."""
        document = self.db[self.collection].find_one({"_id": document_id})
        return document is not None and any(document.get(key) != value for key, value in scope.items())

    def get_all(self, params: RequestParameters, **scope: Any) -> Page:
        mapping = property_mappings.lookup(self.dto_type, self.storage_type)
        sort_keys = compile_order_by(params.order_by, mapping)
        query = {**self._active(**scope), **self._search(params.search_query)}
        documents = get_documents(self.collection, query, sort=to_mongo_sort(sort_keys), database=self.db)
        page = Page.create(documents, params.page_number, params.page_size)
        logger.debug(
            "%s page %s/%s (%s total)", self.collection, page.current_page, page.total_pages, page.total_count
        )
        return page

    def add(self, entity: BaseModel, document_id: Optional[ObjectId] = None) -> str:
        if document_id is None:
            new_id = create_document(self.collection, entity, database=self.db)
        else:
            new_id = upsert_document(self.collection, document_id, entity, database=self.db)
        logger.info("Created %s %s", self.collection, new_id)
        return new_id

    def update(self, document_id: ObjectId, changes: Dict[str, Any]) -> None:
        self.db[self.collection].update_one(
            {"_id": document_id}, {"$set": {**changes, "updated_at": now_utc()}}
        )
        logger.info("Updated %s %s", self.collection, document_id)

    def delete(self, document_id: ObjectId) -> None:
        self.db[self.collection].update_one(
            {"_id": document_id}, {"$set": {"is_deleted": True, "deleted_on": now_utc()}}
        )
        logger.info("Soft deleted %s %s", self.collection, document_id)


class MovieRepository(Repository):
    collection = "movie"
    dto_type = MovieDto
    storage_type = Movie
    search_fields = ("title", "description", "producer", "actors", "genre")


class ShowtimeRepository(Repository):
    collection = "showtime"
    dto_type = ShowtimeDto
    storage_type = Showtime


class HallRepository(Repository):
    collection = "hall"
    dto_type = HallDto
    storage_type = Hall


class SeatRepository(Repository):
    collection = "seat"
    dto_type = SeatDto
    storage_type = Seat


class TicketRepository(Repository):
    collection = "ticket"
    dto_type = TicketDto
    storage_type = Ticket

    def seat_taken(self, showtime_id: str, seat_id: str, exclude_id: Optional[ObjectId] = None) -> bool:
        query = self._active(showtime_id=showtime_id, seat_id=seat_id)
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.db[self.collection].find_one(query) is not None
