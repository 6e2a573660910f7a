from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

LAT_KEYS = ('lat', 'latitude')
LON_KEYS = ('lng', 'lon', 'longitude')

class Coordinate(BaseModel):
    """Immutable geographic point."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @classmethod
    def from_payload(cls, payload: dict) -> 'Coordinate':
        """
        Builds a Coordinate from a JSON object using the front end's keys.
        Accepts {lat, lng}, {lat, lon} or {latitude, longitude}.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Coordenada inválida: {payload!r}")
        lat = next((payload[k] for k in LAT_KEYS if k in payload), None)
        lon = next((payload[k] for k in LON_KEYS if k in payload), None)
        if lat is None or lon is None:
            raise ValueError(f"Coordenada sin latitud/longitud: {payload!r}")
        if isinstance(lat, bool) or isinstance(lon, bool):
            raise ValueError(f"Coordenada inválida: {payload!r}")
        return cls(latitude=lat, longitude=lon)

    def as_query(self) -> str:
        return f"{self.latitude},{self.longitude}"

class TextValue(BaseModel):
    text: Optional[str] = None
    value: Optional[float] = None

class Element(BaseModel):
    status: Optional[str] = None
    distance: Optional[TextValue] = None
    duration: Optional[TextValue] = None

class Row(BaseModel):
    elements: Optional[list[Element]] = []

class DistanceMatrixResponse(BaseModel):
    status: Optional[str] = None
    rows: Optional[list[Row]] = []
    error_message: Optional[str] = None
    origin_addresses: Optional[list[str]] = None
    destination_addresses: Optional[list[str]] = None
