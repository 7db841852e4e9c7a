from app.handlers.playlists import routes

__all__ = ["routes"]
