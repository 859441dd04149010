from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Booking saga metrics

    Outcome counters per stage, optimistic-write conflicts, and gateway latency.
    """

    def __init__(self):
        self.booking_requests = Counter(
            'trip_booking_requests_total',
            'Booking requests by outcome',
            ['flow', 'result'],  # result: success / error class name
        )

        self.booking_duration = Histogram(
            'trip_booking_duration_seconds',
            'End-to-end booking saga duration',
            ['flow'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.reservation_conflicts = Counter(
            'trip_reservation_conflicts_total',
            'Conditional writes rejected because the trip changed since it was read',
            ['trip_id'],
        )

        self.tickets_issued = Counter(
            'trip_tickets_issued_total',
            'Ticket records written',
            ['ticket_type'],
        )

        self.gateway_requests = Counter(
            'payment_gateway_requests_total',
            'Payment gateway calls by operation and outcome',
            ['operation', 'result'],
        )

        self.gateway_duration = Histogram(
            'payment_gateway_duration_seconds',
            'Payment gateway call latency',
            ['operation'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

    def record_booking(self, *, flow: str, result: str, duration: float):
        self.booking_requests.labels(flow=flow, result=result).inc()
        self.booking_duration.labels(flow=flow).observe(duration)

    def record_reservation_conflict(self, *, trip_id: str):
        self.reservation_conflicts.labels(trip_id=trip_id).inc()

    def record_tickets_issued(self, *, ticket_type: str, count: int):
        self.tickets_issued.labels(ticket_type=ticket_type).inc(count)

    def record_gateway_call(self, *, operation: str, result: str, duration: float):
        self.gateway_requests.labels(operation=operation, result=result).inc()
        self.gateway_duration.labels(operation=operation).observe(duration)


metrics = BookingMetrics()
