from cassandra import DriverException, RequestExecutionException
from cassandra.cluster import NoHostAvailable
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.database.scylla_setting import execute_cql
from src.platform.exception.exceptions import StoreError
from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import ITransactionCommandRepo
from src.service.trip_booking.domain.entity import Transaction


class TransactionCommandRepoScyllaImpl(ITransactionCommandRepo):
    def __init__(self, *, settings: Settings) -> None:
        self.table = settings.TRANSACTIONS_TABLE
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def create(self, *, transaction: Transaction) -> None:
        with self.tracer.start_as_current_span(
            'db.scylla.insert_transaction', attributes={'transaction.id': transaction.id}
        ):
            try:
                result = await execute_cql(
                    f"""
                    INSERT INTO {self.table} (
                        id, trip_id, amount, status, payment_with, requester,
                        contact_person_name, contact_person_phone, contact_person_email,
                        callback_auth_token, created_at, reference_data
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    IF NOT EXISTS
                    """,
                    (
                        transaction.id,
                        transaction.trip_id,
                        transaction.amount,
                        transaction.status.value,
                        transaction.payment_with.value,
                        transaction.requester,
                        transaction.contact_person.name,
                        transaction.contact_person.phone,
                        transaction.contact_person.email,
                        transaction.callback_auth_token,
                        transaction.created_at,
                        transaction.reference_data,
                    ),
                )
            except (DriverException, RequestExecutionException, NoHostAvailable) as e:
                raise StoreError(f'Inserting transaction failed: {e}') from e

            if not result.was_applied:
                raise StoreError(f'Transaction {transaction.id} already exists')
