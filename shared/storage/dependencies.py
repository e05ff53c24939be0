from fastapi import Request

from .base import Storage


def get_storage(request: Request) -> Storage:
    """The storage handle the app was built with (see main.create_app)."""
    return request.app.state.storage
