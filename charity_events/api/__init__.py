"""Events API service."""
