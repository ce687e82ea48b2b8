"""
Duplicate suppression for ICY metadata
"""

from typing import Optional

from .models import IcyMetadataBlock


class ChangeDetector:
    """Remembers the last emitted raw metadata text

    Owned by a single monitoring worker, so no locking is needed.
    """

    def __init__(self):
        self.last_raw: Optional[str] = None

    def should_emit(self, block: IcyMetadataBlock) -> bool:
        """True when the block has a title and its raw text differs from the last one"""
        if not block.title or block.raw_metadata == self.last_raw:
            return False
        self.last_raw = block.raw_metadata
        return True
