"""
ScyllaDB session management

One driver session per event loop, created lazily and reused across requests.
The driver is synchronous; statements run on worker threads so the event loop
never blocks on the network.

Usage:
    rows = await execute_cql('SELECT * FROM dev_trips WHERE id = %s', (trip_id,))
"""

import asyncio
from typing import Any, Sequence

from cassandra import ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, Session
from cassandra.policies import (
    DCAwareRoundRobinPolicy,
    ExponentialReconnectionPolicy,
    TokenAwarePolicy,
)
from cassandra.query import SimpleStatement

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


scylla_sessions: dict[int, Session] = {}


def _create_cluster() -> Cluster:
    """
    Build the cluster handle.

    - Token-aware, DC-local routing so a trip row is served by its replica
    - LOCAL_QUORUM by default; lightweight transactions use LOCAL_SERIAL for
      the Paxos round so conditional writes stay linearizable per row
    """
    default_profile = ExecutionProfile(
        load_balancing_policy=TokenAwarePolicy(
            DCAwareRoundRobinPolicy(local_dc=settings.SCYLLA_LOCAL_DC)
        ),
        consistency_level=ConsistencyLevel.LOCAL_QUORUM,
        serial_consistency_level=ConsistencyLevel.LOCAL_SERIAL,
        request_timeout=settings.SCYLLA_REQUEST_TIMEOUT,
    )

    return Cluster(
        contact_points=settings.SCYLLA_CONTACT_POINTS,
        port=settings.SCYLLA_PORT,
        auth_provider=PlainTextAuthProvider(
            username=settings.SCYLLA_USERNAME,
            password=settings.SCYLLA_PASSWORD.get_secret_value(),
        ),
        protocol_version=4,
        connect_timeout=settings.SCYLLA_CONNECT_TIMEOUT,
        control_connection_timeout=settings.SCYLLA_CONTROL_TIMEOUT,
        reconnection_policy=ExponentialReconnectionPolicy(base_delay=1, max_delay=30),
        execution_profiles={EXEC_PROFILE_DEFAULT: default_profile},
    )


async def get_scylla_session() -> Session:
    loop_id = id(asyncio.get_running_loop())

    if loop_id in scylla_sessions:
        return scylla_sessions[loop_id]

    Logger.base.info(f'🔌 [ScyllaDB] Creating new session (loop={loop_id})...')
    cluster = _create_cluster()
    session = await asyncio.to_thread(cluster.connect, settings.SCYLLA_KEYSPACE)
    scylla_sessions[loop_id] = session
    Logger.base.info(
        f'✅ [ScyllaDB] Session created (loop={loop_id}, keyspace={settings.SCYLLA_KEYSPACE})'
    )
    return session


async def execute_cql(statement: str, params: Sequence[Any] | None = None) -> Any:
    """Run one statement on the current loop's session and return the ResultSet."""
    session = await get_scylla_session()
    return await asyncio.to_thread(session.execute, statement, params)


async def close_all_scylla_sessions() -> None:
    for loop_id, session in list(scylla_sessions.items()):
        try:
            await asyncio.to_thread(session.cluster.shutdown)
            Logger.base.info(f'🔌 [ScyllaDB] Session closed (loop={loop_id})')
        except Exception as e:
            Logger.base.error(f'❌ [ScyllaDB] Error closing session (loop={loop_id}): {e}')
    scylla_sessions.clear()


async def warmup_scylla_session() -> bool:
    """Open connections at startup so the first booking does not pay for them."""
    try:
        session = await get_scylla_session()
        query = SimpleStatement(
            'SELECT release_version FROM system.local', consistency_level=ConsistencyLevel.ONE
        )
        await asyncio.to_thread(session.execute, query)
        Logger.base.info('✅ [ScyllaDB Warmup] Completed: connections ready')
        return True
    except Exception as e:
        Logger.base.error(f'❌ [ScyllaDB Warmup] Failed: {e}')
        return False
