"""Sort mappings for every (DTO, storage model) pair the API exposes."""

from dtos import HallDto, MovieDto, SeatDto, ShowtimeDto, TicketDto
from schemas import Hall, Movie, Seat, Showtime, Ticket

MOVIE_MAPPING = {
    "id": ["_id"],
    "title": ["title"],
    "description": ["description"],
    "length_in_seconds": ["length_in_seconds"],
    "producer": ["producer"],
    "actors": ["actors"],
    "genre": ["genre"],
    "release_year": ["release_year"],
    "age_restriction": ["age_restriction"],
}

SHOWTIME_MAPPING = {
    "id": ["_id"],
    "movie_id": ["movie_id"],
    "hall_id": ["hall_id"],
    "time_of_playing": ["time_of_playing"],
    "three_dee": ["three_dee"],
}

HALL_MAPPING = {
    "id": ["_id"],
    "hall_number": ["hall_number"],
    "vip_seats": ["vip_seats"],
}

SEAT_MAPPING = {
    "id": ["_id"],
    "hall_id": ["hall_id"],
    "row_no": ["row_no"],
    "seat_no": ["seat_no"],
    "position": ["row_no", "seat_no"],
}

TICKET_MAPPING = {
    "id": ["_id"],
    "customer_id": ["customer_id"],
    "showtime_id": ["showtime_id"],
    "seat_id": ["seat_id"],
    "reserved": ["reserved"],
    "paid": ["paid"],
    "price": ["price"],
}


def register_default_mappings(registry) -> None:
    registry.register(MovieDto, Movie, MOVIE_MAPPING)
    registry.register(ShowtimeDto, Showtime, SHOWTIME_MAPPING)
    registry.register(HallDto, Hall, HALL_MAPPING)
    registry.register(SeatDto, Seat, SEAT_MAPPING)
    registry.register(TicketDto, Ticket, TICKET_MAPPING)
