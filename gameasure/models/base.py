from typing import List, Optional, Protocol, Tuple, runtime_checkable


QueryItem = Tuple[str, Optional[str]]


@runtime_checkable
class QueryRepresentable(Protocol):
    """
    Anything that can contribute key/value pairs to a hit.

    Values may be None; those items are dropped when the hit is encoded.
    """

    @property
    def query_items(self) -> List[QueryItem]: ...
