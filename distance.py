"""
Total driving distance of a multi-stop route.

Each consecutive pair of points is queried against the Google Distance
Matrix API, one request at a time and in route order, and the per-segment
kilometers are summed. The first failing segment aborts the whole
calculation; no partial total is ever returned.
"""
import logging
import math
from typing import Callable, Optional, Sequence

import requests
from pydantic import ValidationError

import config
from schemas import Coordinate, DistanceMatrixResponse

logger = logging.getLogger(__name__)

SegmentQuery = Callable[[Coordinate, Coordinate], float]


class DistanceError(Exception):
    """Base class for distance-matrix failures."""


class TransportError(DistanceError):
    """HTTP layer failure: non-2xx status or connectivity problem."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderError(DistanceError):
    """The provider rejected the request (top-level status != OK)."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.status = status


class NoDataError(DistanceError):
    """Well-formed response without a usable distance for the segment."""


class DistanceMatrixClient:
    """Talks to the Distance Matrix API and returns kilometers per segment."""
    MODE = 'driving'

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key or config.GOOGLE_MAPS_API_KEY
        if not self.api_key:
            raise ValueError("Google Maps API Key is missing. Set it in the environment variables.")
        self.timeout = timeout
        self.session = session or requests.Session()

    def query_segment_distance(self, origin: Coordinate, destination: Coordinate) -> float:
        params = {
            'origins': origin.as_query(),
            'destinations': destination.as_query(),
            'mode': self.MODE,
            'key': self.api_key,
        }
        logger.info(f"Consultando Distance Matrix: {params['origins']} -> {params['destinations']}")

        try:
            response = self.session.get(config.DISTANCE_MATRIX_URL, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            # the exception text carries the request URL, credential included
            logger.error(f"Error de conexión con Distance Matrix: {config.redact_key(e)}")
            raise TransportError(f"Error de conexión con Distance Matrix ({type(e).__name__})") from e

        if not response.ok:
            raise TransportError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError("Respuesta inválida de Distance Matrix: el cuerpo no es JSON") from e

        status = body.get('status') if isinstance(body, dict) else None
        if status != 'OK':
            message = body.get('error_message') if isinstance(body, dict) else None
            detail = f" ({message})" if message else ''
            raise ProviderError(f"Google Maps API error: {status}{detail}", status=status)

        try:
            data = DistanceMatrixResponse(**body)
        except ValidationError as e:
            raise NoDataError(f"No distance data found in response ({e.error_count()} invalid field(s))") from e

        element = data.rows[0].elements[0] if data.rows and data.rows[0].elements else None
        if element is None or element.status != 'OK' or element.distance is None or element.distance.value is None:
            status = element.status if element is not None else None
            raise NoDataError(f"No distance data found in response (element status: {status})")

        km = element.distance.value / 1000.0
        logger.info(f"Segmento calculado: {km:.2f}km")
        return km


def route_points(origin: Coordinate, destination: Coordinate,
                 waypoints: Optional[Sequence[Coordinate]] = None) -> list[Coordinate]:
    return [origin, *(waypoints or ()), destination]


def compute_total_distance(origin: Coordinate, destination: Coordinate,
                           waypoints: Optional[Sequence[Coordinate]] = None,
                           *, query: Optional[SegmentQuery] = None) -> int:
    """
    Sums the driving distance of every consecutive segment of the route.

    Args:
        origin: first point of the route
        destination: last point of the route
        waypoints: intermediate stops, in visiting order
        query: callable returning kilometers for one (origin, destination) pair,
            defaults to a DistanceMatrixClient built from the environment

    Returns:
        Total distance in whole kilometers.

    Raises:
        DistanceError: the error of the first failing segment; later segments
            are not queried.
    """
    if query is None:
        with requests.Session() as session:
            client = DistanceMatrixClient(session=session)
            return compute_total_distance(origin, destination, waypoints,
                                          query=client.query_segment_distance)

    points = route_points(origin, destination, waypoints)
    total_km = 0.0

    for i in range(len(points) - 1):
        try:
            total_km += query(points[i], points[i + 1])
        except DistanceError as e:
            logger.warning(f"Segmento {i + 1}/{len(points) - 1} falló: {e}")
            raise

    logger.info(f"Distancia total: {total_km:.2f}km en {len(points) - 1} segmento(s)")
    return int(math.floor(total_km + 0.5))
