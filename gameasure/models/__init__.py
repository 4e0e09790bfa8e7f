from .base import QueryItem, QueryRepresentable
from .collect import (
    AnalyticsVersion,
    AppInfo,
    ClientIdentifier,
    Collect,
    Identifier,
    UserIdentifier,
)
from .custom import Custom
from .hits import Event, ExceptionHit, HitRequest, Request, Screen

__all__ = [
    "QueryItem",
    "QueryRepresentable",
    "AnalyticsVersion",
    "AppInfo",
    "ClientIdentifier",
    "Collect",
    "Identifier",
    "UserIdentifier",
    "Custom",
    "Event",
    "ExceptionHit",
    "HitRequest",
    "Request",
    "Screen",
]
