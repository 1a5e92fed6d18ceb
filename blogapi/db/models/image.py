from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageRef:
    """Where an image lives in the external store.

    ``public_id`` is the handle needed to delete the asset; ``url`` is what
    clients load. Never mutated: a replacement is a new ``ImageRef``.
    """
    url: str
    public_id: Optional[str] = None
