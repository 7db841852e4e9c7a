from app.utils.http_client import HttpError, build_session, fetch_json
from app.utils.logging import setup_logging

__all__ = ["HttpError", "build_session", "fetch_json", "setup_logging"]
