"""ConvertiQ: upload-and-convert web service."""
