"""Shared helpers used across the resolver, config and rewriter modules."""
