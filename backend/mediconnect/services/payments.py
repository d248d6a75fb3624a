"""Payment service - records the wallet transfer that settles an appointment.

The transfer itself happens in the patient's wallet; this side only stores
its transaction hash against the appointment. Payment state never touches
the lifecycle status.
"""

import logging

import requests
from fastapi import HTTPException
from sqlalchemy.orm import Session
from web3.exceptions import (
    ProviderConnectionError, RequestTimedOut, Web3RPCError, Web3ValidationError,
)

from ..core import wallet
from ..core.config import settings
from ..core.db import commit_or_500
from ..core.security import Caller
from ..models.appointment import PAYMENT_COMPLETED, PAYMENT_FAILED, Appointment
from ..models.user import PATIENT

logger = logging.getLogger(__name__)

# node down or too slow to answer
_NODE_UNREACHABLE = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ProviderConnectionError,
    RequestTimedOut,
    ConnectionError,
    TimeoutError,
)
# the node answered but refused the hash we sent
_BAD_TRANSACTION = (Web3ValidationError, Web3RPCError, ValueError)


class PaymentService:
    def __init__(self, db: Session):
        self.db = db

    def _owned_appointment(self, caller: Caller, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if caller.role != PATIENT or caller.profile is None or appointment.patient_id != caller.profile.id:
            raise HTTPException(status_code=403, detail="Only the booking patient can record this payment")
        return appointment

    def record_payment(self, caller: Caller, appointment_id: int, transaction_hash: str) -> Appointment:
        appointment = self._owned_appointment(caller, appointment_id)

        if appointment.payment_status == PAYMENT_COMPLETED:
            if appointment.transaction_hash == transaction_hash:
                return appointment
            raise HTTPException(status_code=409, detail="Payment already recorded with a different transaction")

        if settings.VERIFY_PAYMENTS_ONCHAIN:
            self._verify_onchain(appointment, transaction_hash)

        appointment.payment_status = PAYMENT_COMPLETED
        appointment.transaction_hash = transaction_hash
        commit_or_500(self.db, "record a payment")
        self.db.refresh(appointment)
        logger.info(f"💰 Payment recorded for appointment {appointment.id}: {transaction_hash}")
        return appointment

    def _verify_onchain(self, appointment: Appointment, transaction_hash: str):
        doctor_wallet = appointment.doctor.user.wallet_address
        try:
            check = wallet.check_transfer(transaction_hash, doctor_wallet, appointment.consultation_fee)
        except _NODE_UNREACHABLE as e:
            logger.error(f"❌ Chain lookup failed for {transaction_hash}: {e}")
            raise HTTPException(status_code=502, detail="Could not reach the blockchain node")
        except _BAD_TRANSACTION as e:
            logger.warning(f"⚠️ Node rejected transaction hash {transaction_hash}: {e}")
            raise HTTPException(status_code=422, detail="Invalid transaction hash")

        if not check.confirmed:
            raise HTTPException(status_code=409, detail=check.reason)
        if not check.ok:
            appointment.payment_status = PAYMENT_FAILED
            appointment.transaction_hash = transaction_hash
            commit_or_500(self.db, "record a failed payment")
            logger.warning(f"⚠️ Payment for appointment {appointment.id} failed verification: {check.reason}")
            raise HTTPException(status_code=422, detail=check.reason)
