"""
Default context shared by every hit an engine emits.
"""

from dataclasses import dataclass, field
from enum import Enum
from importlib.metadata import PackageNotFoundError, metadata
import locale
import logging
import os
import sys
from typing import List, Optional, Union
import uuid

from .base import QueryItem

LOG = logging.getLogger(__name__)


class AnalyticsVersion(Enum):
    ONE = "1"

    @property
    def query_items(self) -> List[QueryItem]:
        return [("v", self.value)]


@dataclass(frozen=True)
class ClientIdentifier:
    """
    Anonymous identifier of the user.
    """

    anonymous_id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def query_items(self) -> List[QueryItem]:
        return [("cid", str(self.anonymous_id).upper())]


@dataclass(frozen=True)
class UserIdentifier:
    """
    Known identifier associated with the user.
    """

    user_id: str

    @property
    def query_items(self) -> List[QueryItem]:
        return [("uid", self.user_id)]


Identifier = Union[ClientIdentifier, UserIdentifier]


@dataclass(frozen=True)
class AppInfo:
    name: str
    identifier: Optional[str] = None
    version: Optional[str] = None

    @property
    def query_items(self) -> List[QueryItem]:
        return [
            ("an", self.name),
            ("aid", self.identifier),
            ("av", self.version),
        ]

    @classmethod
    def default(cls, distribution: Optional[str] = None) -> "AppInfo":
        """
        Describe the running application.

        When a distribution name is given its installed metadata provides the
        name and version, otherwise the program name is used on its own.

        Args:
            distribution (Optional[str]): Installed distribution to read.

        Returns:
            AppInfo: The application description.
        """
        if distribution:
            try:
                meta = metadata(distribution)
                return cls(
                    name=meta["Name"],
                    identifier=distribution,
                    version=meta["Version"],
                )
            except PackageNotFoundError:
                LOG.debug("Distribution %s not installed", distribution)

        program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
        return cls(name=program or "python")


def get_user_language() -> Optional[str]:
    try:
        code = locale.getlocale()[0]
    except ValueError:
        return None

    if not code or code in ("C", "POSIX"):
        return None

    return code.split("_")[0]


class Collect:
    """
    The default context: protocol version, application, user and property.

    Built once and read by every hit, so its items are computed on
    construction and never change afterwards.
    """

    def __init__(
        self,
        user: Identifier,
        tracking_id: str,
        version: AnalyticsVersion = AnalyticsVersion.ONE,
        datasource: Optional[str] = "app",
        user_language: Optional[str] = None,
        app_info: Optional[AppInfo] = None,
    ):
        if user_language is None:
            user_language = get_user_language()
        if app_info is None:
            app_info = AppInfo.default()

        self.tracking_id = tracking_id
        self._query_items: List[QueryItem] = (
            version.query_items
            + app_info.query_items
            + user.query_items
            + [
                ("tid", tracking_id),
                ("ds", datasource),
                ("ul", user_language),
            ]
        )

    @property
    def query_items(self) -> List[QueryItem]:
        return list(self._query_items)

    def __repr__(self) -> str:
        return f"Collect(tracking_id={self.tracking_id!r})"
