"""Infrastructure layer: cache tiers and external store clients."""
