"""Stripe payment-intent creation."""

import logging

import stripe

from sportfitx.core import config
from sportfitx.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)

PAYMENT_METHOD_TYPES = ['card']


def to_minor_units(price: float) -> int:
    return int(round(price * 100))


def create_payment_intent(price: float) -> str:
    """Create a card-only intent for ``price`` and return its client secret."""
    amount = to_minor_units(price)
    try:
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=config.PAYMENT_CURRENCY,
            payment_method_types=PAYMENT_METHOD_TYPES,
            api_key=config.STRIPE_SECRET_KEY,
        )
    except stripe.StripeError as exc:
        logger.exception('Stripe rejected a payment intent for %s %s', amount, config.PAYMENT_CURRENCY)
        raise UpstreamFailure() from exc

    logger.info('Created payment intent %s for %s %s', intent.id, amount, config.PAYMENT_CURRENCY)
    return intent.client_secret
