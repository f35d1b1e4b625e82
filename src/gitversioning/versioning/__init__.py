"""Version comparison and version format substitution."""
