"""Core data models shared by every pipeline stage."""
