"""ClusterConfig: options for a clustering run."""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class ClusterConfig:
    """Options accepted by :func:`gene_dendro.cluster_items`.

    normalize : bool
        Divide all distances by the largest one so they lie in [0, 1].
    allow_single_item : bool
        If True a one-item input yields a leaf-only dendrogram with no
        merges; if False it is rejected with DataError.
    """

    normalize: bool = True
    allow_single_item: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise TypeError(
                    f"ClusterConfig.{f.name} must be a bool, got {type(value).__name__}."
                )

    @classmethod
    def from_kwargs(cls, **kwargs) -> ClusterConfig:
        """Build a config, rejecting unknown option names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise TypeError(
                f"Unknown clustering option(s) {unknown}. Valid: {sorted(known)}"
            )
        return cls(**kwargs)
