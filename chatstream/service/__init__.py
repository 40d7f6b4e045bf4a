"""Service layer: caller-facing API and the developer CLI."""
