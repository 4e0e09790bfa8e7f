from dataclasses import dataclass
from typing import ClassVar, List, Optional, Union

from .base import QueryItem


class HitRequest:
    hit_type: ClassVar[str]

    @property
    def query_items(self) -> List[QueryItem]:
        return [("t", self.hit_type)] + self.payload_items()

    def payload_items(self) -> List[QueryItem]:
        raise NotImplementedError


@dataclass(frozen=True)
class Event(HitRequest):
    hit_type: ClassVar[str] = "event"

    category: str
    action: str
    label: Optional[str] = None
    value: Optional[int] = None

    def payload_items(self) -> List[QueryItem]:
        return [
            ("ec", self.category),
            ("ea", self.action),
            ("el", self.label),
            ("ev", None if self.value is None else str(self.value)),
        ]


@dataclass(frozen=True)
class ExceptionHit(HitRequest):
    hit_type: ClassVar[str] = "exception"

    description: str

    def payload_items(self) -> List[QueryItem]:
        return [("exd", self.description)]


@dataclass(frozen=True)
class Screen(HitRequest):
    hit_type: ClassVar[str] = "screenview"

    name: str

    def payload_items(self) -> List[QueryItem]:
        return [("cd", self.name)]


Request = Union[Event, ExceptionHit, Screen]
