from content_api.s3.delete_objects import delete_s3_object
from content_api.s3.read_objects import object_exists_in_s3
from content_api.s3.write_objects import upload_s3_object
from tests.consts import TEST_BUCKET_NAME


def test_upload_s3_object__is_public_by_default(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "uploads/a.png", b"png", mocked_aws, content_type="image/png")

    assert object_exists_in_s3(TEST_BUCKET_NAME, "uploads/a.png", mocked_aws)
    grants = mocked_aws.get_object_acl(Bucket=TEST_BUCKET_NAME, Key="uploads/a.png")["Grants"]
    assert any(grant["Grantee"].get("URI", "").endswith("/global/AllUsers") for grant in grants)


def test_upload_s3_object__private(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "private.png", b"png", mocked_aws, public=False)

    grants = mocked_aws.get_object_acl(Bucket=TEST_BUCKET_NAME, Key="private.png")["Grants"]
    assert not any(grant["Grantee"].get("URI", "").endswith("/global/AllUsers") for grant in grants)
    head = mocked_aws.head_object(Bucket=TEST_BUCKET_NAME, Key="private.png")
    assert head["ContentType"] == "application/octet-stream"


def test_object_exists_in_s3__missing_key(mocked_aws):
    assert object_exists_in_s3(TEST_BUCKET_NAME, "nope.png", mocked_aws) is False


def test_delete_s3_object(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "gone.png", b"png", mocked_aws)

    delete_s3_object(TEST_BUCKET_NAME, "gone.png", mocked_aws)

    assert object_exists_in_s3(TEST_BUCKET_NAME, "gone.png", mocked_aws) is False
