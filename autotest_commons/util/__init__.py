"""Constants, decorators and file helpers."""
