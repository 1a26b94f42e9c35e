"""Download responder: serves converted artifacts with attachment headers."""
