"""Functions for writing objects to an S3 bucket."""

from typing import Optional

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: bytes,
    s3_client: "S3Client",
    content_type: Optional[str] = None,
    public: bool = True,
) -> None:
    """
    Upload a file to an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the file to upload.
    :param s3_client: The boto3 S3 client to upload with.
    :param content_type: The MIME type of the file, e.g. "image/png".
    :param public: Grant anonymous read access to the object.
    """
    extra = {"ACL": "public-read"} if public else {}
    s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        ContentType=content_type or "application/octet-stream",
        **extra,
    )
