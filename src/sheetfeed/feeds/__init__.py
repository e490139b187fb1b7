"""Feed loading: transport, credentials, XML parsing and 401 retry."""

from .auth import AuthProvider, StaticTokenAuth, GoogleCredentialsAuth
from .envelope import FeedEnvelope, as_list, text_of, parse_timestamp
from .errors import (
    SheetFeedError,
    ConfigError,
    TransportError,
    AuthError,
    RemoteFeedError,
    ParseError,
    NotFoundError,
    EmptyResultError,
)
from .loader import FeedKind, FeedLoader
from .parser import parse_feed_xml
from .transport import Transport, HttpxTransport

__all__ = [
    "AuthProvider",
    "StaticTokenAuth",
    "GoogleCredentialsAuth",
    "FeedEnvelope",
    "as_list",
    "text_of",
    "parse_timestamp",
    "SheetFeedError",
    "ConfigError",
    "TransportError",
    "AuthError",
    "RemoteFeedError",
    "ParseError",
    "NotFoundError",
    "EmptyResultError",
    "FeedKind",
    "FeedLoader",
    "parse_feed_xml",
    "Transport",
    "HttpxTransport",
]
