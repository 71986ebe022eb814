from dataclasses import dataclass


@dataclass(slots=True)
class CascadeState:
    """Resolution state shared across systems.

    ``resolving`` is the busy flag: it is raised before the first detection of
    a cascade and dropped once the board is stable and published. Swap
    requests arriving while it is set are rejected.
    """

    resolving: bool = False
    depth: int = 0
    steps: int = 0
