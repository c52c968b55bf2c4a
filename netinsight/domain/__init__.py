"""Domain models for the contact network."""
