"""Application layer: cache clients (services), DTOs and interfaces."""
