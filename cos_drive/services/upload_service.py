from flask import current_app
from cos_drive.exceptions import ValidationFailure, UploadFailed, StoreError
from cos_drive.models.file_record import FileRecord
import os
import time
import uuid

# Checked in order, a later match overrides an earlier one
MIME_CATEGORIES = [
    ('video', ('video',)),
    ('audio', ('audio',)),
    ('pdf', ('pdf',)),
    ('image', ('png', 'jpg', 'jpeg')),
]

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def category_for(mime_type):
    """Map a MIME type onto one of the storage categories, or None."""
    category = None
    mime_type = (mime_type or '').lower()
    for name, needles in MIME_CATEGORIES:
        if any(needle in mime_type for needle in needles):
            category = name
    return category

def timestamp_ms():
    return int(time.time() * 1000)

def build_category_key(store_path, mime_type, original_name):
    """<store_path>/<category>/<ms timestamp>-<original name>, skipping empty segments."""
    segments = [store_path.strip('/') if store_path else '', category_for(mime_type) or '']
    segments.append(f"{timestamp_ms()}-{original_name}")
    return '/'.join(segment for segment in segments if segment)

def etag_of(ack):
    """COS acknowledgements are response headers; look the ETag up case-insensitively."""
    for name, value in (ack or {}).items():
        if name.lower() == 'etag':
            return value
    return None

def unique_name(original_name):
    """A fresh uuid4 token keeping the original extension."""
    return f"{uuid.uuid4().hex}{os.path.splitext(original_name)[1]}"


class UploadService:
    def __init__(self, store, metadata, resolver, max_size, store_path=''):
        self.store = store
        self.metadata = metadata
        self.resolver = resolver
        self.max_size = max_size
        self.store_path = store_path

    def validate(self, data, size):
        if not data:
            raise ValidationFailure("Uploaded file is empty")
        if size is None:
            size = len(data)
        if size > self.max_size or len(data) > self.max_size:
            raise ValidationFailure(f"File exceeds the maximum upload size of {self.max_size} bytes")

    def build_key(self, original_name, parent_id=None, path_prefix=None):
        token = unique_name(original_name)
        if parent_id is not None:
            return f"{self.resolver.resolve_path_string(parent_id)}/{token}"
        if path_prefix and path_prefix.strip('/'):
            return f"{path_prefix.strip('/')}/{token}"
        return token

    def upload_file(self, data, original_name, content_type=None, size=None, parent_id=None, path_prefix=None):
        """Store data under a generated key, then record it.

        With parent_id the key sits under the parent folder's path, with
        path_prefix under that prefix, otherwise at the bucket root.
        """
        self.validate(data, size)
        if parent_id is not None:
            parent = self.metadata.find_by_id(parent_id)
            if not parent.is_folder:
                raise ValidationFailure(f"Parent {parent_id} is not a folder")

        key = self.build_key(original_name, parent_id=parent_id, path_prefix=path_prefix)
        return self._put_and_record(data, key, original_name, content_type, parent_id)

    def upload_categorised(self, data, original_name, content_type=None, size=None):
        """Flat upload under STORE_PATH, sorted into a folder per MIME category."""
        self.validate(data, size)
        key = build_category_key(self.store_path, content_type, original_name)
        return self._put_and_record(data, key, original_name, content_type, None)

    def _put_and_record(self, data, key, original_name, content_type, parent_id):
        content_type = content_type or DEFAULT_CONTENT_TYPE
        try:
            ack = self.store.put_object(key, data, content_type=content_type)
        except StoreError as e:
            current_app.logger.error(f"COS put failed for key {key}: {e}")
            raise UploadFailed("Upload File Failed") from e

        if not etag_of(ack):
            current_app.logger.error(f"COS put for key {key} returned no ETag: {ack}")
            raise UploadFailed("Upload File Failed")

        record = self.metadata.create(FileRecord(
            name=original_name,
            type=content_type,
            size=len(data),
            bucket=self.store.bucket,
            key=key,
            store_response=dict(ack),
            parent_id=parent_id,
        ))
        url = self.store.object_url(key)
        current_app.logger.info(f"Uploaded {original_name} ({len(data)} bytes) to {key}, record {record.id}")
        return {'url': url, 'key': key, 'id': record.id}
