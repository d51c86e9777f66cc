import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pipelinetheatre import config


def r2_configured():
    return all([config.R2_ACCOUNT_ID, config.R2_ACCESS_KEY_ID, config.R2_SECRET_ACCESS_KEY])


def _client():
    return boto3.client(
        "s3",
        endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=config.R2_ACCESS_KEY_ID,
        aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
    )


def download_from_r2(key, local_path):
    """
    Download a file from R2 if it exists.
    Returns True if downloaded, False if not configured, not found or on error.
    """
    if not r2_configured():
        return False

    try:
        response = _client().get_object(Bucket=config.R2_BUCKET_NAME, Key=key)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        with open(local_path, "wb") as f:
            f.write(response["Body"].read())
        return True
    except (BotoCoreError, ClientError, OSError):
        return False


def upload_to_r2(files, log_func=None):
    """
    Upload local files to Cloudflare R2.
    files: mapping of object key -> local Path; missing paths are skipped.
    Returns True if successful, False otherwise.
    log_func: optional logging function (defaults to print)
    """
    log = log_func or print

    if not r2_configured():
        log("R2 upload skipped: missing R2 credentials")
        return False

    try:
        s3 = _client()
        uploaded = []
        for key, path in files.items():
            if not path.exists():
                continue
            with open(path, "rb") as f:
                s3.put_object(
                    Bucket=config.R2_BUCKET_NAME,
                    Key=key,
                    Body=f.read(),
                    ContentType="application/json",
                )
            uploaded.append(key)

        log(f"Uploaded to R2: {', '.join(uploaded)}")
        return True
    except (BotoCoreError, ClientError, OSError) as e:
        log(f"R2 upload failed: {e}")
        return False
