"""
Height Resolver - assigns chain heights to headers that may arrive out of order
"""
import logging
from collections import defaultdict, deque
from types import MappingProxyType
from typing import Deque, Dict, List, Mapping, Optional, Union

from blockchain.digest import Digest
from blockchain.header import BlockHeader

logger = logging.getLogger(__name__)


class HeightResolver:
    """
    Tracks resolved heights and orphan headers for a single scan run.

    - The first header admitted is the chain root (height 0), whatever its
      previous hash says
    - A header whose parent is known gets parent height + 1
    - A header whose parent is unknown waits in the orphan pool until the
      parent resolves, then it and all of its waiting descendants resolve
    """

    def __init__(self):
        self._heights: Dict[str, int] = {}
        self._orphans: Dict[str, BlockHeader] = {}  # hash -> header
        self._orphans_by_parent: Dict[str, List[str]] = defaultdict(list)  # prev hash -> orphan hashes
        self._genesis_assigned = False
        self._best_height: Optional[int] = None

    # --- read-only views ---

    @property
    def heights(self) -> Mapping[str, int]:
        return MappingProxyType(self._heights)

    @property
    def orphans(self) -> Mapping[str, BlockHeader]:
        return MappingProxyType(self._orphans)

    @property
    def orphan_count(self) -> int:
        return len(self._orphans)

    @property
    def resolved_count(self) -> int:
        return len(self._heights)

    @property
    def best_height(self) -> Optional[int]:
        return self._best_height

    def height_of(self, block_hash: Union[Digest, str]) -> Optional[int]:
        return self._heights.get(str(block_hash))

    def is_orphan(self, block_hash: Union[Digest, str]) -> bool:
        return str(block_hash) in self._orphans

    # --- admission ---

    def admit(self, header: BlockHeader) -> List[BlockHeader]:
        """
        Admit a header in arrival order.

        Returns the headers that received a height because of this call, in
        the order they must be handed to consumers. Empty when the header was
        parked as an orphan or was already seen.
        """
        block_hash = str(header.hash)

        if not self._genesis_assigned:
            self._genesis_assigned = True
            self._resolve(header, 0)
            logger.info(f"Chain root {block_hash} assigned height 0")
            return [header]

        if block_hash in self._heights or block_hash in self._orphans:
            logger.debug(f"Ignoring duplicate header {block_hash}")
            return []

        prev_height = self._heights.get(str(header.prev_hash))
        if prev_height is None:
            self._add_orphan(header)
            return []

        self._resolve(header, prev_height + 1)
        resolved = [header]
        resolved.extend(self._resolve_descendants(block_hash))
        return resolved

    def _resolve(self, header: BlockHeader, height: int):
        header.assign_height(height)
        self._heights[str(header.hash)] = height
        if self._best_height is None or height > self._best_height:
            self._best_height = height

    def _add_orphan(self, header: BlockHeader):
        block_hash = str(header.hash)
        logger.debug(f"Parent {header.prev_hash} of {block_hash} unknown, holding as orphan")
        self._orphans[block_hash] = header
        self._orphans_by_parent[str(header.prev_hash)].append(block_hash)

    def _resolve_descendants(self, parent_hash: str) -> List[BlockHeader]:
        """Breadth-first over the orphan pool, starting from ``parent_hash``."""
        resolved: List[BlockHeader] = []
        queue: Deque[str] = deque([parent_hash])

        while queue:
            current = queue.popleft()
            children = self._orphans_by_parent.pop(current, None)
            if not children:
                continue
            height = self._heights[current] + 1
            for child_hash in children:
                header = self._orphans.pop(child_hash)
                self._resolve(header, height)
                logger.debug(f"Connected orphan {child_hash} to parent {current} at height {height}")
                resolved.append(header)
                queue.append(child_hash)

        if resolved:
            logger.info(f"Resolved {len(resolved)} orphan header(s) below {parent_hash}")
        return resolved
