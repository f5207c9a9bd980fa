"""
Database Schemas for the Cinema Ticketing API

Each Pydantic model maps to a MongoDB collection named by the lowercase of the class name.
- Movie -> "movie"
- Showtime -> "showtime"
- Hall -> "hall"
- Seat -> "seat"
- Ticket -> "ticket"

Rows are never removed, deleting one sets is_deleted and stamps deleted_on.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Document(BaseModel):
    is_deleted: bool = False
    deleted_on: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Movie(Document):
    title: str
    description: Optional[str] = None
    length_in_seconds: int = Field(..., ge=1)
    producer: Optional[str] = None
    actors: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = None
    age_restriction: int = Field(0, ge=0, description="Minimum age, 0 for everyone")


class Showtime(Document):
    movie_id: str = Field(..., description="ObjectId as string of the movie")
    hall_id: str = Field(..., description="ObjectId as string of the hall")
    time_of_playing: datetime
    three_dee: bool = False


class Hall(Document):
    hall_number: int = Field(..., ge=1)
    vip_seats: int = Field(0, ge=0)


class Seat(Document):
    hall_id: str = Field(..., description="ObjectId as string of the hall")
    row_no: int = Field(..., ge=1)
    seat_no: int = Field(..., ge=1)


class Ticket(Document):
    customer_id: str
    showtime_id: str = Field(..., description="ObjectId as string of the showtime")
    seat_id: str = Field(..., description="ObjectId as string of the seat")
    reserved: bool = False
    paid: bool = False
    price: int = Field(..., ge=0)
