"""
Echo chain builder.

Groups echoes into chains by following parent links up to a root.
Links are resolved through an id -> parent_id table; echoes are never
walked as an object graph.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from echocollector.core.snapshot import EchoSnapshot
from echocollector.core.utils import whole_years_between

logger = logging.getLogger(__name__)


@dataclass
class Chain:
    """
    Echoes sharing a common root.

    Members are listed root first, then in input order.
    """
    root: EchoSnapshot
    members: List[EchoSnapshot] = field(default_factory=list)

    @property
    def total_strength(self) -> int:
        return sum(e.connection_strength or 0 for e in self.members)

    @property
    def length(self) -> int:
        return len(self.members)

    @property
    def years_span(self) -> int:
        """Whole years between the earliest and latest past date."""
        dates = [e.past_date for e in self.members if e.past_date is not None]
        if len(set(dates)) < 2:
            return 0
        return whole_years_between(min(dates), max(dates))

    def __repr__(self) -> str:
        return (
            f"<Chain root={self.root.id} length={self.length} "
            f"strength={self.total_strength}>"
        )


def _index(echoes: Iterable[EchoSnapshot]) -> Dict[int, EchoSnapshot]:
    return {e.id: e for e in echoes}


def _resolve_links(index: Dict[int, EchoSnapshot]) -> Tuple[Dict[int, int], Dict[int, int]]:
    """
    Root id and depth for every echo in the index.

    Each echo is walked at most once; a walk that reaches an echo already
    resolved reuses its root. A walk ends at an echo with no parent, a
    parent missing from the snapshot, or a parent already on the walk.
    In the last case the last echo reached before the repeat is the root
    for the whole cycle.

    Returns (root_of, depth_of); depth counts echoes up to the root, inclusive.
    """
    root_of: Dict[int, int] = {}
    depth_of: Dict[int, int] = {}

    for echo_id in index:
        if echo_id in root_of:
            continue

        path = [echo_id]
        on_path = {echo_id}
        current = index[echo_id]
        root_id: Optional[int] = None
        base_depth = 0

        while current.parent_id is not None and current.parent_id in index:
            parent_id = current.parent_id
            if parent_id in root_of:
                root_id = root_of[parent_id]
                base_depth = depth_of[parent_id]
                break
            if parent_id in on_path:
                logger.warning(
                    f"Cycle in parent links: echo #{current.id} points back to #{parent_id}, "
                    f"treating #{current.id} as root"
                )
                break
            path.append(parent_id)
            on_path.add(parent_id)
            current = index[parent_id]

        if root_id is None:
            root_id = path[-1]

        for distance, node_id in enumerate(reversed(path), start=1):
            root_of[node_id] = root_id
            depth_of[node_id] = base_depth + distance

    return root_of, depth_of


def find_root(echo: EchoSnapshot, echoes: Iterable[EchoSnapshot]) -> EchoSnapshot:
    """Root echo of the chain the given echo belongs to."""
    index = _index(echoes)
    index.setdefault(echo.id, echo)
    root_of, _ = _resolve_links(index)
    return index[root_of[echo.id]]


def build_chains(echoes: Iterable[EchoSnapshot]) -> List[Chain]:
    """
    Build one chain per root echo.

    Every input echo lands in exactly one chain and every chain contains
    its root. Chains are ordered by total strength, strongest first;
    equal strengths keep the order in which their roots were first reached.
    """
    snapshot = list(echoes)
    index = _index(snapshot)
    root_of, _ = _resolve_links(index)

    chains: Dict[int, Chain] = {}
    for echo in snapshot:
        root_id = root_of[echo.id]

        chain = chains.get(root_id)
        if chain is None:
            chain = Chain(root=index[root_id])
            chains[root_id] = chain

        if echo.id == root_id:
            chain.members.insert(0, echo)
        else:
            chain.members.append(echo)

    ordered = sorted(chains.values(), key=lambda c: c.total_strength, reverse=True)

    logger.debug(f"Built {len(ordered)} chains from {len(snapshot)} echoes")
    return ordered


def chain_depths(echoes: Iterable[EchoSnapshot]) -> Dict[int, int]:
    """Depth of every echo: number of echoes from it up to its root, inclusive."""
    _, depth_of = _resolve_links(_index(echoes))
    return depth_of


def chain_depth(echo_id: int, echoes: Iterable[EchoSnapshot]) -> int:
    """Number of echoes from echo_id up to its root, inclusive (0 if absent)."""
    return chain_depths(echoes).get(echo_id, 0)


def longest_chain(echoes: Iterable[EchoSnapshot]) -> int:
    """Deepest parent path in the snapshot (0 when empty)."""
    return max(chain_depths(echoes).values(), default=0)


def chain_for(echo_id: int, chains: List[Chain]) -> Optional[Chain]:
    """Chain containing the given echo, if any."""
    for chain in chains:
        if any(member.id == echo_id for member in chain.members):
            return chain
    return None
