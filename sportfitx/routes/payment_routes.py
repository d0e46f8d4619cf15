import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from sportfitx.auth.dependencies import ensure_owner, get_store, verify_jwt, verify_payment_intent_caller
from sportfitx.integrations import stripe_gateway
from sportfitx.models.payment import PaymentIntentRequest, PaymentIntentResponse, PaymentRecord, SettlementResult
from sportfitx.repository import DESCENDING, DocumentStore

router = APIRouter(tags=['payments'])

logger = logging.getLogger(__name__)

SETTLEMENT_UPDATE = {'$inc': {'enrollment': 1, 'total_seats': -1}}


@router.post('/create-payment-intent', response_model=PaymentIntentResponse)
def create_payment_intent(
    data: PaymentIntentRequest,
    _claims: dict | None = Depends(verify_payment_intent_caller),
):
    return PaymentIntentResponse(client_secret=stripe_gateway.create_payment_intent(data.price))


@router.get('/payments')
def list_payments(
    email: str | None = Query(default=None),
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> list[dict]:
    if not email:
        return []
    ensure_owner(claims, email)
    return store.payments.find({'email': email}, sort=('date', DESCENDING))


def settle_payment(payment: dict, store: DocumentStore) -> SettlementResult:
    """Record a payment, drop the pending selection and move the class counters.

    The three writes are independent: a failure in a later step leaves the
    earlier ones in place and propagates to the caller.
    """
    class_id = payment['classId']

    insert_result = store.payments.insert_one(payment)
    delete_result = store.selected_classes.delete_one({'classId': class_id})
    update_result = store.classes.update_one({'_id': class_id}, SETTLEMENT_UPDATE, upsert=True)

    if update_result.upserted_id is not None:
        logger.warning('Settlement for unknown class %s created a placeholder class document', class_id)
    logger.info(
        'Settled payment %s for class %s (selection removed: %s)',
        insert_result.inserted_id,
        class_id,
        bool(delete_result.deleted_count),
    )

    return SettlementResult(
        insert_result=insert_result,
        delete_result=delete_result,
        update_result=update_result,
    )


@router.post('/payments', response_model=SettlementResult)
def create_payment(
    data: PaymentRecord,
    _claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
):
    payment = data.to_document()
    if not payment.get('date'):
        payment['date'] = datetime.now(timezone.utc).isoformat()
    return settle_payment(payment, store)
