"""FastAPI dependency providers: read from app.state, set by main.py."""

from fastapi import Request

from browser.controller import QueryController


def get_controller(request: Request) -> QueryController:
    """QueryController for the browsing session."""
    return request.app.state.controller


def get_api_client(request: Request):
    """VideoAPIProtocol implementation used for fetches and health checks."""
    return request.app.state.api_client


def get_recent_store(request: Request):
    """RecentSearchStore instance."""
    return request.app.state.recent_store


def get_browser_config(request: Request):
    """BrowserConfig instance."""
    return request.app.state.browser_config
