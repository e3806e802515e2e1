from fastapi import Request

from store import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry
