#!/usr/bin/env python3
"""
ScyllaDB Reset Script

1. Drop & recreate the keyspace
2. Run scylla_schemas.cql with the table prefix rewritten to settings.ENV

Only the structure is reset; run `python script/seed_data.py` for a demo trip.
"""

from pathlib import Path
import re
import time

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster

from src.platform.config.core_setting import settings
from src.platform.constant.path import SCYLLA_SCHEMA_FILE


def load_statements(schema_file: Path, *, env: str, keyspace: str) -> list[str]:
    """Split the schema into statements, dropping comment lines and renaming dev_/sharebus."""
    schema_cql = schema_file.read_text()
    statements = []
    for raw in schema_cql.split(';'):
        lines = [line for line in raw.split('\n') if not line.strip().startswith('--')]
        cleaned = '\n'.join(lines).strip()
        if not cleaned:
            continue
        cleaned = re.sub(r'\bsharebus\b', keyspace, cleaned)
        cleaned = re.sub(r'\bdev_', f'{env}_', cleaned)
        statements.append(cleaned)
    return statements


def reset_scylladb_keyspace() -> None:
    print(f'📊 Connecting to ScyllaDB: {settings.SCYLLA_CONTACT_POINTS}')

    cluster = Cluster(
        contact_points=settings.SCYLLA_CONTACT_POINTS,
        port=settings.SCYLLA_PORT,
        auth_provider=PlainTextAuthProvider(
            username=settings.SCYLLA_USERNAME,
            password=settings.SCYLLA_PASSWORD.get_secret_value(),
        ),
    )
    session = cluster.connect()

    print(f'🗑️  Dropping keyspace {settings.SCYLLA_KEYSPACE}...')
    session.execute(f'DROP KEYSPACE IF EXISTS {settings.SCYLLA_KEYSPACE}')

    if not SCYLLA_SCHEMA_FILE.exists():
        raise FileNotFoundError(f'Schema file not found: {SCYLLA_SCHEMA_FILE}')

    statements = load_statements(
        SCYLLA_SCHEMA_FILE, env=settings.ENV, keyspace=settings.SCYLLA_KEYSPACE
    )
    print(f'   📋 Found {len(statements)} statements (ENV={settings.ENV})')

    for i, statement in enumerate(statements, 1):
        session.execute(statement)
        print(f'   ✅ Statement {i}/{len(statements)} executed')
        if statement.upper().startswith('CREATE KEYSPACE'):
            time.sleep(3)  # let the schema settle before creating tables

    cluster.shutdown()
    print('✅ ScyllaDB keyspace reset completed!')


if __name__ == '__main__':
    reset_scylladb_keyspace()
