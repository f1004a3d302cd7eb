"""Services module - provides external service integrations."""

from .auth_client import AuthAPIClient
from .advisor import PlacementAdvisor

__all__ = ['AuthAPIClient', 'PlacementAdvisor']
