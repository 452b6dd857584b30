"""Version parsing, patch acceptance, catalog loading and the dependency audit."""
