"""Maven repository client."""
