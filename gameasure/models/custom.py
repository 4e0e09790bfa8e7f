from dataclasses import dataclass
from typing import List

from .base import QueryItem


@dataclass(frozen=True)
class Custom:
    """
    A custom dimension and metric pair attached to a single hit.
    """

    dimension_index: int
    dimension_value: str
    metric_index: int
    metric_value: int

    @property
    def query_items(self) -> List[QueryItem]:
        return [
            (f"cd{self.dimension_index}", self.dimension_value),
            (f"cm{self.metric_index}", str(self.metric_value)),
        ]
