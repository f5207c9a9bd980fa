import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import settings
from database import db
from errors import ResourceQueryError
from property_mapping import property_mappings
import halls
import movies
import seats
import showtimes
import tickets

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Cinema Ticketing API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Pagination", "Location"],
)

app.include_router(movies.router)
app.include_router(showtimes.router)
app.include_router(halls.router)
app.include_router(seats.router)
app.include_router(tickets.router)


@app.exception_handler(ResourceQueryError)
async def resource_query_error_handler(request: Request, exc: ResourceQueryError):
    if exc.client_error:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})
    logger.error("Failed %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.on_event("startup")
def register_property_mappings():
    property_mappings.initialize()


@app.get("/")
def read_root():
    return {"message": "Cinema Ticketing API running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    if db is not None:
        response["database_name"] = db.name
        try:
            response["collections"] = db.list_collection_names()[:10]
            response["database"] = "✅ Connected & Working"
            response["connection_status"] = "Connected"
        except Exception as e:
            logger.warning("Database check failed: %s", e)
            response["database"] = f"⚠️ Connected but error: {str(e)[:50]}"
    response["database_url"] = "✅ Set" if settings.DATABASE_URL else "❌ Not Set"
    return response
