"""HTTP exposition layer."""
