from flask import current_app
from cos_drive.exceptions import ValidationFailure
from cos_drive.services.upload_service import timestamp_ms


class MultipartService:
    """Init / upload part / complete, one SDK call each.

    Nothing is kept between calls: the client holds the upload id and the
    (part number, ETag) pairs until it completes the upload.
    """

    def __init__(self, store, max_chunk_size, store_path=''):
        self.store = store
        self.max_chunk_size = max_chunk_size
        self.store_path = store_path

    def build_large_key(self, file_name):
        """<store_path>/large/<ms timestamp>-<file name>"""
        if not file_name:
            raise ValidationFailure("fileName required")
        prefix = f"{self.store_path.strip('/')}/" if self.store_path and self.store_path.strip('/') else ''
        return f"{prefix}large/{timestamp_ms()}-{file_name}"

    def initiate(self, key):
        if not key:
            raise ValidationFailure("key required")
        resp = self.store.multipart_init(key)
        upload_id = resp['UploadId']
        current_app.logger.info(f"Initiated multipart upload {upload_id} for {key}")
        return upload_id

    def upload_part(self, key, upload_id, part_number, data):
        if not key or not upload_id:
            raise ValidationFailure("key and uploadId required")
        if not data:
            raise ValidationFailure("Chunk is empty")
        if len(data) > self.max_chunk_size:
            raise ValidationFailure(f"Chunk exceeds the maximum size of {self.max_chunk_size} bytes")
        resp = self.store.multipart_upload(key, upload_id, part_number, data)
        current_app.logger.info(f"Uploaded part {part_number} ({len(data)} bytes) of {upload_id}")
        return resp['ETag']

    def complete(self, key, upload_id, parts):
        if not key or not upload_id:
            raise ValidationFailure("key and uploadId required")
        normalized = normalize_parts(parts)
        resp = self.store.multipart_complete(key, upload_id, normalized)
        current_app.logger.info(f"Completed multipart upload {upload_id} for {key} with {len(normalized)} parts")
        return resp.get('Location')


def normalize_parts(parts):
    """Accept {PartNumber, ETag} or {partNumber, eTag} dicts, ordered by part number."""
    if not parts:
        raise ValidationFailure("parts required")
    normalized = []
    for part in parts:
        if not isinstance(part, dict):
            raise ValidationFailure("Each part must be an object")
        number = part.get('PartNumber', part.get('partNumber'))
        etag = part.get('ETag', part.get('eTag'))
        if number is None or not etag:
            raise ValidationFailure("Each part needs a part number and an ETag")
        try:
            number = int(number)
        except (ValueError, TypeError):
            raise ValidationFailure(f"Invalid part number: {number}")
        normalized.append({'PartNumber': number, 'ETag': etag})
    return sorted(normalized, key=lambda part: part['PartNumber'])
