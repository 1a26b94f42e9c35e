"""Conversion dispatcher and the stub converters it routes to."""
