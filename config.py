import os
import re
from dotenv import load_dotenv

load_dotenv()

# --- CREDENCIALES ---
GOOGLE_MAPS_API_KEY = os.getenv('GOOGLE_MAPS_API_KEY') or os.getenv('VITE_GOOGLE_MAPS_API_KEY')
MERCADOPAGO_ACCESS_TOKEN = os.getenv('MERCADOPAGO_ACCESS_TOKEN')

# --- HTTP ---
HTTP_TIMEOUT = float(os.getenv('HTTP_TIMEOUT', '10.0'))

# --- PROVEEDORES ---
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
PLACE_AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
MERCADOPAGO_PREFERENCES_URL = "https://api.mercadopago.com/checkout/preferences"

NOMINATIM_USER_AGENT = os.getenv('NOMINATIM_USER_AGENT', 'LogisticsApp/1.0 (contact@example.com)')
NOMINATIM_COUNTRY_CODES = os.getenv('NOMINATIM_COUNTRY_CODES', 'ar,mx,cl,co,pe')
PLACES_LANGUAGE = os.getenv('PLACES_LANGUAGE', 'es')
MERCADOPAGO_AUTO_RETURN = 'approved'

# --- SERVIDOR ---
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
PORT = int(os.getenv('PORT', 7777))


def redact_key(text: str) -> str:
    """Masks `key=` query values so provider URLs can be logged."""
    return re.sub(r'(key=)[^&\s\'"]+', r'\1***', str(text))
