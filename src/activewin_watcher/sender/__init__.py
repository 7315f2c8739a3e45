"""HTTP transport module for posting events to the collector."""

from .http_sender import HTTPSender, SenderConfig, create_default_sender

__all__ = ["HTTPSender", "SenderConfig", "create_default_sender"]
