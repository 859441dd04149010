from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

LOG_DIR = BASE_DIR / 'logs'

SCYLLA_SCHEMA_FILE = BASE_DIR / 'src' / 'platform' / 'database' / 'scylla_schemas.cql'
