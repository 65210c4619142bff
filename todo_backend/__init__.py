"""Todo list backend: FastAPI routes over a PostgreSQL connection pool."""

__version__ = "1.0.0"
