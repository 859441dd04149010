"""
Sharelead pre-reservation

A sharelead proposes a trip and pays a deposit before seats are opened to
joiners. Only the payment is initiated here: inventory, participants and
tickets stay untouched, and the transaction starts in the INITIATE status of
the pre-reservation lifecycle.
"""

import math
import time
from typing import Any, Mapping, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.app.dto import PaymentInitiationResult
from src.service.trip_booking.app.interface import ITripRepo
from src.service.trip_booking.app.saga import PaymentOrchestrator, RequesterProfileResolver
from src.service.trip_booking.domain.enum import PreReservationStatus
from src.service.trip_booking.domain.exception import InvalidBookingRequestError
from src.service.trip_booking.domain.value_object import Requester


class InitiateShareleadPreReservationUseCase:
    def __init__(
        self,
        *,
        trip_repo: ITripRepo,
        requester_profile_resolver: RequesterProfileResolver,
        payment_orchestrator: PaymentOrchestrator,
    ) -> None:
        self.trip_repo = trip_repo
        self.requester_profile_resolver = requester_profile_resolver
        self.payment_orchestrator = payment_orchestrator
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        trip_repo: ITripRepo = Depends(Provide[Container.trip_repo]),
        requester_profile_resolver: RequesterProfileResolver = Depends(
            Provide[Container.requester_profile_resolver]
        ),
        payment_orchestrator: PaymentOrchestrator = Depends(
            Provide[Container.payment_orchestrator]
        ),
    ) -> Self:
        return cls(
            trip_repo=trip_repo,
            requester_profile_resolver=requester_profile_resolver,
            payment_orchestrator=payment_orchestrator,
        )

    @staticmethod
    def _parse(raw_input: Mapping[str, Any]) -> tuple[str, float]:
        trip_id = str(raw_input.get('trip_id') or '').strip()
        if not trip_id:
            raise InvalidBookingRequestError('trip_id is required')
        try:
            amount = float(str(raw_input.get('amount')).strip())
        except (TypeError, ValueError):
            raise InvalidBookingRequestError('amount must be a number')
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidBookingRequestError('amount must be a positive finite number')
        return trip_id, amount

    @Logger.io
    async def initiate(
        self, *, requester: Requester, raw_input: Mapping[str, Any]
    ) -> PaymentInitiationResult:
        start = time.perf_counter()
        result_label = 'success'

        with self.tracer.start_as_current_span(
            'use_case.initiate_sharelead_pre_reservation',
            attributes={'requester.sub': requester.sub},
        ):
            try:
                trip_id, amount = self._parse(raw_input)
                requester = await self.requester_profile_resolver.resolve(requester=requester)
                trip = await self.trip_repo.get_by_id(trip_id=trip_id)

                transaction, payment = await self.payment_orchestrator.initiate(
                    trip=trip,
                    requester=requester,
                    amount=amount,
                    status=PreReservationStatus.INITIATE,
                )
            except Exception as e:
                result_label = type(e).__name__
                raise
            finally:
                metrics.record_booking(
                    flow='sharelead', result=result_label, duration=time.perf_counter() - start
                )

        Logger.base.info(f'✅ [SHARELEAD] Pre-reservation {transaction.id} on trip {trip_id}')
        return payment
