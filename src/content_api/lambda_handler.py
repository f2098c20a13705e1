"""Serverless entry point: the same app behind an API Gateway / Lambda URL via Mangum.

Lambda hosts have a read-only filesystem outside /tmp, so deployments either
configure the S3 credential or point LOCAL_STORAGE_DIR and UPLOADS_DIR at /tmp.
"""
from mangum import Mangum

from content_api.config.settings import get_settings
from content_api.main import create_app

app = create_app(get_settings())

handler = Mangum(app, lifespan="off")
