from flask import Flask, jsonify, request
from flask_cors import CORS
import requests
import logging
from datetime import datetime

import config
from distance import (
    DistanceMatrixClient, NoDataError, ProviderError, TransportError,
    compute_total_distance,
)
from payments import MercadoPagoService, PaymentConfigError
from places import lookup_places
from schemas import Coordinate

# Configurar logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, send_wildcard=True, allow_headers=['authorization', 'x-client-info', 'apikey', 'content-type'])

def error_response(message: str, code: str, http_status: int):
    return jsonify({"error": message, "code": code}), http_status

def parse_route(data) -> tuple[Coordinate, Coordinate, list[Coordinate]]:
    """
    Reads {origin, destination, waypoints?} from the request body.
    Raises ValueError when any point is missing or out of range.
    """
    if not isinstance(data, dict):
        raise ValueError("El cuerpo debe ser un objeto JSON con 'origin' y 'destination'")
    if 'origin' not in data or 'destination' not in data:
        raise ValueError("Informe 'origin' y 'destination' en el cuerpo de la solicitud")

    waypoints = data.get('waypoints')
    if waypoints is None:
        waypoints = []
    elif not isinstance(waypoints, list):
        raise ValueError("'waypoints' debe ser una lista de coordenadas")

    origin = Coordinate.from_payload(data['origin'])
    destination = Coordinate.from_payload(data['destination'])
    return origin, destination, [Coordinate.from_payload(w) for w in waypoints]

# --- RUTAS DE LA API ---

@app.route('/')
def home():
    """Ruta raíz con información de la API"""
    return jsonify({
        "api": "Logística - distancias, lugares y pagos",
        "endpoints": {
            "/": "Información de la API",
            "/health": "Estado de salud",
            "/calculate-distance": "POST - Distancia total de manejo (origen, paradas, destino)",
            "/places-autocomplete": "GET - Autocompletado, detalle de lugar o geocodificación Nominatim",
            "/create-mercadopago-preference": "POST - Crear preferencia de pago en Mercado Pago"
        },
        "servicios_utilizados": {
            "distancia": "Google Distance Matrix (modo driving)",
            "lugares": "Google Places / Nominatim (OpenStreetMap)",
            "pagos": "Mercado Pago Checkout Pro"
        },
        "ejemplo_distancia": {
            "origin": {"lat": -34.6037, "lng": -58.3816},
            "waypoints": [{"lat": -34.9214, "lng": -57.9545}],
            "destination": {"lat": -38.0055, "lng": -57.5426}
        }
    })

@app.route('/health')
def health():
    """Verificación de salud de la aplicación"""
    status = {
        "status": "online",
        "timestamp": datetime.now().isoformat(),
        "credenciales": {
            "google_maps": bool(config.GOOGLE_MAPS_API_KEY),
            "mercadopago": bool(config.MERCADOPAGO_ACCESS_TOKEN)
        },
        "servicios": {}
    }

    checks = {
        "google_maps": (config.DISTANCE_MATRIX_URL, {}),
        "nominatim": (config.NOMINATIM_SEARCH_URL, {'User-Agent': config.NOMINATIM_USER_AGENT}),
    }
    for name, (url, headers) in checks.items():
        try:
            r = requests.get(url, headers=headers, timeout=2)
            status["servicios"][name] = "operativo" if r.status_code < 500 else "con problemas"
        except requests.exceptions.RequestException:
            status["servicios"][name] = "inaccesible"

    return jsonify(status)

@app.route('/calculate-distance', methods=['POST'])
def calculate_distance():
    """
    Distancia total de manejo pasando por todas las paradas

    Body JSON:
    {
        "origin": {"lat": -34.6037, "lng": -58.3816},
        "destination": {"lat": -38.0055, "lng": -57.5426},
        "waypoints": [{"lat": -34.9214, "lng": -57.9545}]
    }
    """
    try:
        origin, destination, waypoints = parse_route(request.get_json(silent=True))
    except ValueError as e:
        return error_response(str(e), "PARAMETRO_INVALIDO", 400)

    logger.info(f"=== Calculando distancia con {len(waypoints)} parada(s) ===")
    with requests.Session() as session:
        try:
            client = DistanceMatrixClient(timeout=config.HTTP_TIMEOUT, session=session)
        except ValueError as e:
            logger.error(f"Configuración incompleta: {e}")
            return error_response(str(e), "CONFIGURACION_INCOMPLETA", 500)

        try:
            total = compute_total_distance(origin, destination, waypoints,
                                           query=client.query_segment_distance)
        except NoDataError as e:
            return error_response(str(e), "DISTANCIA_NO_DISPONIBLE", 422)
        except ProviderError as e:
            return error_response(str(e), "ERROR_PROVEEDOR", 502)
        except TransportError as e:
            return error_response(str(e), "ERROR_TRANSPORTE", 502)

    return jsonify({
        "distance": total,
        "unit": "km",
        "segments": len(waypoints) + 1
    }), 200

@app.route('/places-autocomplete', methods=['GET'])
def places_autocomplete():
    payload, http_status = lookup_places(
        input_text=request.args.get('input'),
        lookup_type=request.args.get('type'),
        place_id=request.args.get('place_id'),
        address=request.args.get('address'),
    )
    return jsonify(payload), http_status

@app.route('/create-mercadopago-preference', methods=['POST'])
def create_mercadopago_preference():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Body must be a JSON object with 'items'"}), 400

    items = data.get('items')
    if not isinstance(items, list) or not items:
        return jsonify({"error": "'items' must be a non-empty list"}), 400

    try:
        service = MercadoPagoService()
    except PaymentConfigError as e:
        logger.error(str(e))
        return jsonify({"error": str(e)}), 500

    payload, http_status = service.create_preference(items, data.get('back_urls'))
    return jsonify(payload), http_status

@app.errorhandler(404)
def not_found(error):
    return error_response("Endpoint no encontrado. Consulte / para ver los endpoints disponibles",
                          "ENDPOINT_NO_ENCONTRADO", 404)

@app.errorhandler(500)
def internal_error(error):
    return error_response("Error interno del servidor", "ERROR_INTERNO", 500)

if __name__ == '__main__':
    logger.info(f"Iniciando servidor en el puerto {config.PORT}")
    app.run(host='0.0.0.0', port=config.PORT, debug=False)
