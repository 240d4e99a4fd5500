"""Configuration, logging, database helpers and domain errors."""
