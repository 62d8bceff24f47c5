"""
Event Stream Provider Clients

External provider adapters for the event relay.
"""

from .base import BaseEventsProvider
from .twilio import TwilioEventsProvider

__all__ = ["BaseEventsProvider", "TwilioEventsProvider"]
