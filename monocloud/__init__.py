"""monocloud: tiered caching service for repository graphs, AI analysis and speech."""
