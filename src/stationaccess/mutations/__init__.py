"""Write operations and the cache invalidation that follows them."""

from stationaccess.mutations.pipeline import MutationPipeline

__all__ = ["MutationPipeline"]
