from qcloud_cos import CosConfig, CosS3Client
from qcloud_cos.cos_exception import CosClientError, CosServiceError
from cos_drive.exceptions import StoreError
import logging


logger = logging.getLogger(__name__)


class CosStore:
    """Thin CosS3Client wrapper bound to one bucket and region.

    Every SDK exception is re-raised as StoreError so the services never see
    qcloud_cos types.
    """

    def __init__(self, client, bucket, region, public_url=None):
        self._client = client
        self.bucket = bucket
        self.region = region
        self._public_url = (public_url or f'https://{bucket}.cos.{region}.myqcloud.com').rstrip('/')

    @classmethod
    def from_config(cls, config, client=None):
        if client is None:
            cos_config = CosConfig(
                Region=config['COS_REGION'],
                SecretId=config['COS_SECRET_ID'],
                SecretKey=config['COS_SECRET_KEY'],
                Scheme='https',
            )
            client = CosS3Client(cos_config)
        return cls(
            client,
            bucket=config['COS_BUCKET'],
            region=config['COS_REGION'],
            public_url=config.get('COS_PUBLIC_URL'),
        )

    def _wrap_sdk_error(self, e, operation, key):
        """Translate a qcloud_cos exception into StoreError, logging the original at DEBUG."""
        logger.debug(f"COS {operation} failed for key={key}: {e}")
        if isinstance(e, CosServiceError):
            try:
                code = e.get_error_code()
            except (KeyError, TypeError):
                # error body was not parseable XML
                code = None
            raise StoreError(
                f"COS {operation} failed for key={key}: {code}",
                code=code,
                store_status=e.get_status_code(),
            ) from e
        raise StoreError(f"COS {operation} failed for key={key}: {e}") from e

    def object_url(self, key):
        return f"{self._public_url}/{key}"

    def put_object(self, key, body, content_type=None):
        kwargs = {}
        if content_type:
            kwargs['ContentType'] = content_type
        try:
            return self._client.put_object(Bucket=self.bucket, Body=body, Key=key, **kwargs)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "put", key)

    def get_object(self, key):
        try:
            return self._client.get_object(Bucket=self.bucket, Key=key)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "get", key)

    def delete_object(self, key):
        try:
            return self._client.delete_object(Bucket=self.bucket, Key=key)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "delete", key)

    def list_objects(self, prefix, marker='', max_keys=1000):
        """List one page under prefix. Returns (keys, is_truncated, next_marker)."""
        params = {
            'Bucket': self.bucket,
            'Prefix': prefix,
            'MaxKeys': max_keys,
        }
        # Only pass a marker when we have one, an empty one still takes part in signing
        if marker:
            params['Marker'] = marker
        try:
            resp = self._client.list_objects(**params)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "list", prefix)

        keys = [obj['Key'] for obj in resp.get('Contents') or []]
        # COS answers IsTruncated as the string 'true'/'false'
        is_truncated = str(resp.get('IsTruncated', 'false')).lower() == 'true'
        next_marker = resp.get('NextMarker') or (keys[-1] if keys else '')
        return keys, is_truncated, next_marker

    def delete_objects(self, keys):
        """Batch delete. Returns the list of per-key errors reported by COS."""
        delete = {
            'Object': [{'Key': key} for key in keys],
            'Quiet': 'true',
        }
        try:
            resp = self._client.delete_objects(Bucket=self.bucket, Delete=delete)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "batch delete", keys[0] if keys else '')
        return resp.get('Error') or []

    def signed_url(self, key, expires):
        try:
            return self._client.get_presigned_download_url(Bucket=self.bucket, Key=key, Expired=expires)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "sign", key)

    def multipart_init(self, key):
        try:
            return self._client.create_multipart_upload(Bucket=self.bucket, Key=key)
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "multipart init", key)

    def multipart_upload(self, key, upload_id, part_number, body):
        try:
            return self._client.upload_part(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                PartNumber=part_number,
                UploadId=upload_id,
            )
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "upload part", key)

    def multipart_complete(self, key, upload_id, parts):
        try:
            return self._client.complete_multipart_upload(
                Bucket=self.bucket,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={'Part': parts},
            )
        except (CosServiceError, CosClientError) as e:
            self._wrap_sdk_error(e, "multipart complete", key)
