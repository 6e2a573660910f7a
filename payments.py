import logging
from typing import Optional
import requests

import config

logger = logging.getLogger(__name__)

class PaymentConfigError(Exception):
    """Mercado Pago credentials are not configured."""
    pass

class MercadoPagoService:
    def __init__(self, access_token: Optional[str] = None, timeout: Optional[float] = None):
        self.access_token = access_token or config.MERCADOPAGO_ACCESS_TOKEN
        if not self.access_token:
            raise PaymentConfigError('MERCADOPAGO_ACCESS_TOKEN not configured')
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def create_preference(self, items: list, back_urls: Optional[dict] = None) -> tuple[dict, int]:
        """
        Create a checkout preference in Mercado Pago
        """
        headers = {
            'Authorization': f'Bearer {self.access_token}',
            'Content-Type': 'application/json',
        }
        body = {
            'items': items,
            'back_urls': back_urls,
            'auto_return': config.MERCADOPAGO_AUTO_RETURN,
        }

        logger.info(f"Creando preferencia en Mercado Pago ({len(items)} ítem(s))")
        try:
            response = requests.post(config.MERCADOPAGO_PREFERENCES_URL, json=body,
                                     headers=headers, timeout=self.timeout)
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Mercado Pago Exception: {e}")
            return {'error': str(e)}, 500

        if not response.ok:
            message = data.get('message') if isinstance(data, dict) else None
            logger.warning(f"Mercado Pago rechazó la preferencia: {response.status_code} {message}")
            return {'error': message or 'Error creating preference'}, 400

        logger.info(f"Preferencia creada: {data.get('id')}")
        return {'id': data.get('id'), 'init_point': data.get('init_point')}, 200
