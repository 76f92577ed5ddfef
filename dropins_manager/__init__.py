"""Keeps the OSGi bundles.info registry in line with the dropins directory."""
