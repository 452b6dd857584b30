"""Release artifact naming and documentation publishing."""
