"""FastAPI dependency injection."""

from src.data.coop_api import CooperativeAPIClient


def get_coop_client() -> CooperativeAPIClient:
    return CooperativeAPIClient()
