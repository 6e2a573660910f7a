import logging
from typing import Optional
import requests

import config

logger = logging.getLogger(__name__)

GOOGLE_ERROR = 'Google Maps API error'
PASS_THROUGH_STATUSES = ('OK', 'ZERO_RESULTS')
HTTP_ERROR_MESSAGES = {
    403: 'API key invalid or quota exceeded',
    503: 'Service temporarily unavailable',
}

def _error_payload(error: str, message: str, status=None) -> dict:
    payload = {'error': error, 'message': message, 'fallback_available': True}
    if status is not None:
        payload['status'] = status
    return payload

def build_request(input_text: Optional[str], lookup_type: Optional[str],
                  place_id: Optional[str], address: Optional[str]) -> tuple[str, dict, dict, bool]:
    """
    Chooses the provider endpoint for a lookup.
    Returns (url, params, headers, is_nominatim).
    """
    if lookup_type == 'details' and place_id:
        params = {'place_id': place_id, 'fields': 'geometry', 'key': config.GOOGLE_MAPS_API_KEY}
        return config.PLACE_DETAILS_URL, params, {}, False

    if lookup_type == 'nominatim-geocode' and address:
        params = {
            'format': 'json',
            'q': address,
            'limit': 1,
            'countrycodes': config.NOMINATIM_COUNTRY_CODES,
        }
        # Nominatim usage policy requires an identifying User-Agent
        headers = {'User-Agent': config.NOMINATIM_USER_AGENT}
        return config.NOMINATIM_SEARCH_URL, params, headers, True

    params = {
        'input': input_text or '',
        'key': config.GOOGLE_MAPS_API_KEY,
        'language': config.PLACES_LANGUAGE,
        'types': 'geocode',
    }
    return config.PLACE_AUTOCOMPLETE_URL, params, {}, False

def lookup_places(input_text: Optional[str] = None, lookup_type: Optional[str] = None,
                  place_id: Optional[str] = None, address: Optional[str] = None) -> tuple[dict, int]:
    """
    Proxies autocomplete, place details and Nominatim geocoding.

    Provider failures come back as HTTP 200 with an `error` body and
    `fallback_available: true` so the front end can switch to its fallback.
    Only a request without any search parameter is rejected with 400.
    """
    if not input_text and not place_id and not address:
        return {'error': 'Missing required parameters'}, 400

    url, params, headers, is_nominatim = build_request(input_text, lookup_type, place_id, address)
    provider = 'Nominatim' if is_nominatim else 'Google Maps'
    logger.info(f"Consultando {provider}...")

    try:
        response = requests.get(url, params=params, headers=headers, timeout=config.HTTP_TIMEOUT)

        if not response.ok:
            logger.error(f"Falló la consulta a {provider}: {response.status_code} {response.reason}")
            if is_nominatim:
                return _error_payload('Internal server error',
                                      f"API request failed: {response.status_code} {response.reason}"), 200

            logger.error(f"Respuesta de error de Google Maps: {config.redact_key(response.text)}")
            message = HTTP_ERROR_MESSAGES.get(
                response.status_code, f"HTTP {response.status_code}: {response.reason}")
            return _error_payload(GOOGLE_ERROR, message, response.status_code), 200

        data = response.json()

        if not is_nominatim and isinstance(data, dict) and data.get('status') \
                and data['status'] not in PASS_THROUGH_STATUSES:
            logger.warning(f"Google Maps devolvió estado {data['status']}: {data.get('error_message')}")
            return _error_payload(GOOGLE_ERROR, data.get('error_message') or 'Unknown API error', data['status']), 200

        return data, 200

    except (requests.exceptions.RequestException, ValueError) as e:
        # the exception text carries the request URL, credential included
        logger.error(f"Error en places-autocomplete: {config.redact_key(e)}")
        return _error_payload('Internal server error', f"Error al consultar {provider} ({type(e).__name__})"), 200
