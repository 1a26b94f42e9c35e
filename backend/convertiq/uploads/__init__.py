"""Upload receiver: stages multipart file parts under unique names."""
