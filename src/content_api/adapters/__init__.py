"""
Adapter layer for the content API.

Contains the media storage backends (local directory / S3 bucket) selected
per call from the configured credentials.
"""
