"""Functions for deleting objects from an S3 bucket."""

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


def delete_s3_object(bucket_name: str, object_key: str, s3_client: "S3Client") -> None:
    """
    Delete an object from an S3 bucket.

    S3 treats deleting a missing key as success, so this never reports "not found".

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param s3_client: The boto3 S3 client to delete with.
    """
    s3_client.delete_object(Bucket=bucket_name, Key=object_key)
