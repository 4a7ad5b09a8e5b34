"""Concurrent same-origin crawl engine: extraction, scoping, dedup and scheduling."""
