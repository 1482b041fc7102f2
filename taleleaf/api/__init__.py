"""HTTP API for the TaleLeaf context window."""
