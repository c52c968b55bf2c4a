"""Graph source adapters."""
