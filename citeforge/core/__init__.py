"""Core services: configuration, logging, exceptions and shared types."""
