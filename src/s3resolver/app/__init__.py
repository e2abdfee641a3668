"""Application layer for s3resolver."""
