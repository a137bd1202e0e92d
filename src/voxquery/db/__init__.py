from .connect import get_connection, get_db_url

__all__ = ["get_connection", "get_db_url"]
