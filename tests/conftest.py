# tests/conftest.py
import hashlib
import io
import uuid

import pytest
from flask_jwt_extended import create_access_token
from qcloud_cos.cos_exception import CosServiceError

from cos_drive import create_app
from cos_drive.config import Config
from cos_drive.extensions import db


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length-for-hs256'
    COS_SECRET_ID = 'test-secret-id'
    COS_SECRET_KEY = 'test-secret-key'
    COS_BUCKET = 'test-bucket-1250000000'
    COS_REGION = 'ap-guangzhou'
    COS_PUBLIC_URL = 'https://test-bucket-1250000000.cos.ap-guangzhou.myqcloud.com'
    STORE_PATH = 'uploads'
    MAX_UPLOAD_SIZE = 1024
    MAX_CONTENT_LENGTH = 64 * 1024
    COS_LIST_PAGE_SIZE = 1000
    PATH_MAX_DEPTH = 64


def service_error(method, code, status_code, resource=''):
    return CosServiceError(method, {
        'code': code,
        'message': f'{code} (fake)',
        'resource': resource,
        'requestid': 'fake-request-id',
        'traceid': 'fake-trace-id',
    }, status_code)


class FakeStreamBody:
    def __init__(self, data):
        self._data = data
        self._raw = io.BytesIO(data)

    @property
    def closed(self):
        return self._raw.closed

    def get_raw_stream(self):
        return self._raw

    def get_stream(self, chunk_size=1024):
        for start in range(0, len(self._data), chunk_size):
            yield self._data[start:start + chunk_size]


class FakeCosClient:
    """In-memory stand-in for CosS3Client, same keyword signatures."""

    def __init__(self):
        self.objects = {}
        self.uploads = {}
        self.calls = []
        self.fail_put = False
        self.fail_delete_keys = set()
        self.truncate_without_marker = False
        self.last_body = None

    def _etag(self, data):
        return f'"{hashlib.md5(data).hexdigest()}"'

    def put_object(self, Bucket, Body, Key, **kwargs):
        self.calls.append('put_object')
        if self.fail_put:
            raise service_error('PUT', 'AccessDenied', 403, Key)
        data = Body if isinstance(Body, bytes) else Body.read()
        self.objects[Key] = (data, kwargs.get('ContentType'))
        return {'ETag': self._etag(data), 'x-cos-request-id': 'fake-put'}

    def get_object(self, Bucket, Key, **kwargs):
        self.calls.append('get_object')
        if Key not in self.objects:
            raise service_error('GET', 'NoSuchKey', 404, Key)
        data, content_type = self.objects[Key]
        self.last_body = FakeStreamBody(data)
        return {
            'Body': self.last_body,
            'Content-Type': content_type or 'application/octet-stream',
            'Content-Length': str(len(data)),
        }

    def delete_object(self, Bucket, Key, **kwargs):
        self.calls.append('delete_object')
        self.objects.pop(Key, None)
        return {'x-cos-request-id': 'fake-delete'}

    def list_objects(self, Bucket, Prefix='', Delimiter='', Marker='', MaxKeys=1000, **kwargs):
        self.calls.append('list_objects')
        keys = sorted(key for key in self.objects if key.startswith(Prefix) and key > Marker)
        page = keys[:MaxKeys]
        truncated = len(keys) > MaxKeys
        resp = {
            'Name': Bucket,
            'Prefix': Prefix,
            'Marker': Marker,
            'MaxKeys': str(MaxKeys),
            'IsTruncated': 'true' if truncated else 'false',
        }
        if self.truncate_without_marker:
            # a broken listing: claims more pages but gives nothing to page from
            resp['IsTruncated'] = 'true'
            return resp
        if page:
            resp['Contents'] = [{'Key': key, 'Size': str(len(self.objects[key][0]))} for key in page]
        if truncated:
            resp['NextMarker'] = page[-1]
        return resp

    def delete_objects(self, Bucket, Delete, **kwargs):
        self.calls.append('delete_objects')
        deleted, errors = [], []
        for obj in Delete['Object']:
            key = obj['Key']
            if key in self.fail_delete_keys:
                errors.append({'Key': key, 'Code': 'AccessDenied', 'Message': 'Access Denied'})
                continue
            self.objects.pop(key, None)
            deleted.append({'Key': key})
        resp = {}
        if errors:
            resp['Error'] = errors
        if Delete.get('Quiet') != 'true':
            resp['Deleted'] = deleted
        return resp

    def get_presigned_download_url(self, Bucket, Key, Expired=300, **kwargs):
        self.calls.append('get_presigned_download_url')
        return f'https://{Bucket}.cos.ap-guangzhou.myqcloud.com/{Key}?q-sign-algorithm=sha1&q-key-time={Expired}'

    def create_multipart_upload(self, Bucket, Key, **kwargs):
        self.calls.append('create_multipart_upload')
        upload_id = uuid.uuid4().hex
        self.uploads[upload_id] = {'key': Key, 'parts': {}}
        return {'Bucket': Bucket, 'Key': Key, 'UploadId': upload_id}

    def upload_part(self, Bucket, Key, Body, PartNumber, UploadId, **kwargs):
        self.calls.append('upload_part')
        upload = self.uploads.get(UploadId)
        if upload is None or upload['key'] != Key:
            raise service_error('PUT', 'NoSuchUpload', 404, Key)
        upload['parts'][PartNumber] = Body
        return {'ETag': self._etag(Body)}

    def complete_multipart_upload(self, Bucket, Key, UploadId, MultipartUpload, **kwargs):
        self.calls.append('complete_multipart_upload')
        upload = self.uploads.get(UploadId)
        if upload is None or upload['key'] != Key:
            raise service_error('POST', 'NoSuchUpload', 404, Key)
        chunks = []
        for part in MultipartUpload['Part']:
            data = upload['parts'].get(part['PartNumber'])
            if data is None or self._etag(data) != part['ETag']:
                raise service_error('POST', 'InvalidPart', 400, Key)
            chunks.append(data)
        body = b''.join(chunks)
        self.objects[Key] = (body, None)
        del self.uploads[UploadId]
        return {
            'Location': f'{Bucket}.cos.ap-guangzhou.myqcloud.com/{Key}',
            'Bucket': Bucket,
            'Key': Key,
            'ETag': self._etag(body),
        }


@pytest.fixture
def cos_client():
    return FakeCosClient()


@pytest.fixture
def app(cos_client):
    app = create_app(TestConfig, cos_client=cos_client)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity='tester')
    return {'Authorization': f'Bearer {token}'}
