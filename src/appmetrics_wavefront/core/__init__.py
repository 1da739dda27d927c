"""Core domain: models, ports and pure translation helpers."""
