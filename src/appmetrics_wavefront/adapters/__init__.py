"""Adapters that write snapshots to a Wavefront sender."""
