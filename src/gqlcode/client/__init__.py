from .extension import GraphQLExtension
from .language_client import (
    ClientOptions,
    ConnectionState,
    InitializeResult,
    LanguageClient,
    LanguageClientFactory,
    ServerOptions,
)
from .managed_client import ManagedClient
from .registry import EntryState, WorkspaceClientRegistry
from .status_indicator import ClientState, StatusIndicator

__all__ = [
    "ClientOptions",
    "ClientState",
    "ConnectionState",
    "EntryState",
    "GraphQLExtension",
    "InitializeResult",
    "LanguageClient",
    "LanguageClientFactory",
    "ManagedClient",
    "ServerOptions",
    "StatusIndicator",
    "WorkspaceClientRegistry",
]
