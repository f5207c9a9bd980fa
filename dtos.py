"""
Wire models: what clients send and receive.

Storage documents are converted with the *_to_dto functions below; field
names here are the names clients use for `fields` and `orderBy`.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# Movies
class MovieDto(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    length_in_seconds: int
    producer: Optional[str] = None
    actors: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = None
    age_restriction: int = 0


class MovieToCreate(BaseModel):
    title: str
    description: Optional[str] = None
    length_in_seconds: int = Field(..., ge=1)
    producer: Optional[str] = None
    actors: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = None
    age_restriction: int = Field(0, ge=0)


class MovieToUpdate(MovieToCreate):
    pass


class MovieToPatch(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    length_in_seconds: Optional[int] = Field(None, ge=1)
    producer: Optional[str] = None
    actors: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = None
    age_restriction: Optional[int] = Field(None, ge=0)


# Showtimes
class ShowtimeDto(BaseModel):
    id: str
    movie_id: str
    hall_id: str
    time_of_playing: datetime
    three_dee: bool


class ShowtimeToCreate(BaseModel):
    hall_id: str
    time_of_playing: datetime
    three_dee: bool = False


class ShowtimeToUpdate(ShowtimeToCreate):
    pass


class ShowtimeToPatch(BaseModel):
    hall_id: Optional[str] = None
    time_of_playing: Optional[datetime] = None
    three_dee: Optional[bool] = None


# Halls
class HallDto(BaseModel):
    id: str
    hall_number: int
    vip_seats: int


class HallToCreate(BaseModel):
    hall_number: int = Field(..., ge=1)
    vip_seats: int = Field(0, ge=0)


class HallToUpdate(HallToCreate):
    pass


class HallToPatch(BaseModel):
    hall_number: Optional[int] = Field(None, ge=1)
    vip_seats: Optional[int] = Field(None, ge=0)


# Seats
class SeatDto(BaseModel):
    id: str
    hall_id: str
    row_no: int
    seat_no: int


class SeatToCreate(BaseModel):
    row_no: int = Field(..., ge=1)
    seat_no: int = Field(..., ge=1)


class SeatToUpdate(SeatToCreate):
    pass


class SeatToPatch(BaseModel):
    row_no: Optional[int] = Field(None, ge=1)
    seat_no: Optional[int] = Field(None, ge=1)


# Tickets
class TicketDto(BaseModel):
    id: str
    customer_id: str
    showtime_id: str
    seat_id: str
    reserved: bool
    paid: bool
    price: int


class TicketToCreate(BaseModel):
    customer_id: str
    seat_id: str
    reserved: bool = False
    paid: bool = False
    price: int = Field(..., ge=0)


class TicketToUpdate(TicketToCreate):
    pass


class TicketToPatch(BaseModel):
    customer_id: Optional[str] = None
    seat_id: Optional[str] = None
    reserved: Optional[bool] = None
    paid: Optional[bool] = None
    price: Optional[int] = Field(None, ge=0)


# Document -> DTO
def _with_id(document: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return data


def movie_to_dto(document: Dict[str, Any]) -> MovieDto:
    return MovieDto.model_validate(_with_id(document))


def showtime_to_dto(document: Dict[str, Any]) -> ShowtimeDto:
    return ShowtimeDto.model_validate(_with_id(document))


def hall_to_dto(document: Dict[str, Any]) -> HallDto:
    return HallDto.model_validate(_with_id(document))


def seat_to_dto(document: Dict[str, Any]) -> SeatDto:
    return SeatDto.model_validate(_with_id(document))


def ticket_to_dto(document: Dict[str, Any]) -> TicketDto:
    return TicketDto.model_validate(_with_id(document))
