"""Property, resource and YAML model tools."""
