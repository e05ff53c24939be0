import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "storefront")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
SQL_ECHO = _flag("SQL_ECHO")

# Seeds the demo catalog on startup when the category table is empty
SEED_DATABASE = _flag("SEED_DATABASE")

SERVICE_NAME = os.getenv("SERVICE_NAME", "storefront")
# Where the checkout client finds the API when it runs out of process
STOREFRONT_URL = os.getenv("STOREFRONT_URL", "http://localhost:8000")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")
ENABLE_TRACING = _flag("ENABLE_TRACING", "true")
ENABLE_METRICS = _flag("ENABLE_METRICS", "true")
