from flask import current_app
from cos_drive.exceptions import AlreadyExists, ValidationFailure, UploadFailed, DeleteFailed, StoreError
from cos_drive.models.file_record import FileRecord


class FolderService:
    """Folder tree operations spanning COS and the file_records table.

    Deletions always finish on COS before any metadata row is removed, so a
    failure on the store side leaves the tree intact and the call can simply
    be repeated. A failure while deleting rows leaves records that point at
    objects which are already gone.
    """

    def __init__(self, store, metadata, resolver, page_size=1000):
        self.store = store
        self.metadata = metadata
        self.resolver = resolver
        self.page_size = min(page_size, 1000)

    def _require_folder(self, record_id):
        record = self.metadata.find_by_id(record_id)
        if not record.is_folder:
            raise ValidationFailure(f"Record {record_id} is not a folder")
        return record

    def create_folder(self, name, parent_id=None):
        name = (name or '').strip()
        if not name:
            raise ValidationFailure("Folder name required")
        if '/' in name:
            raise ValidationFailure("Folder name must not contain '/'")

        if parent_id is not None:
            self._require_folder(parent_id)
            key = f"{self.resolver.resolve_path_string(parent_id)}/{name}/"
        else:
            key = f"{name}/"

        if self.metadata.find_by_key(self.store.bucket, key):
            raise AlreadyExists(f"Folder {key} already exists")

        try:
            ack = self.store.put_object(key, b'')
        except StoreError as e:
            current_app.logger.error(f"COS put failed for folder key {key}: {e}")
            raise UploadFailed("Create Folder Failed") from e

        return self.metadata.create(FileRecord(
            name=name,
            type=FileRecord.FOLDER,
            size=0,
            bucket=self.store.bucket,
            key=key,
            store_response=dict(ack or {}),
            parent_id=parent_id,
        ))

    def list_folder(self, folder_id=None):
        """Return (path chain, direct children); folder_id None lists the root."""
        if folder_id is None:
            return [], self.metadata.find_children(None)
        self._require_folder(folder_id)
        return self.resolver.resolve_path_chain(folder_id), self.metadata.find_children(folder_id)

    def delete_folder(self, folder_id):
        folder = self._require_folder(folder_id)
        deleted_objects = self._purge_prefix(folder.key)
        deleted_records = self._delete_subtree(folder)
        current_app.logger.info(
            f"Deleted folder {folder_id} ({folder.key}): {deleted_objects} objects, {deleted_records} records"
        )

    def delete_file(self, file_id):
        record = self.metadata.find_by_id(file_id)
        if record.is_folder:
            return self.delete_folder(file_id)

        self.store.delete_object(record.key)
        self._delete_subtree(record)
        current_app.logger.info(f"Deleted file {file_id} ({record.key})")

    def delete_by_key(self, key):
        """Delete one object by key, along with any file records mirroring it."""
        self.store.delete_object(key)
        records = [record for record in self.metadata.find_by_key(self.store.bucket, key) if not record.is_folder]
        for record in records:
            self.metadata.delete(record)
        self.metadata.commit()
        current_app.logger.info(f"Deleted object {key} and {len(records)} file records")
        return len(records)

    def _purge_prefix(self, prefix):
        """Delete every object under prefix, one listing page per batch delete."""
        deleted = 0
        marker = ''
        while True:
            keys, is_truncated, next_marker = self.store.list_objects(prefix, marker=marker, max_keys=self.page_size)
            if keys:
                errors = self.store.delete_objects(keys)
                if errors:
                    failed = ', '.join(error.get('Key', '?') for error in errors[:5])
                    current_app.logger.error(f"Batch delete under {prefix} failed for {len(errors)} keys: {failed}")
                    raise DeleteFailed(f"Failed to delete {len(errors)} objects under {prefix}")
                deleted += len(keys)

            if not is_truncated:
                break
            if not next_marker:
                current_app.logger.error(f"Listing under {prefix} reported truncation without a marker")
                raise DeleteFailed(f"Could not page past the listing under {prefix}, metadata left in place")
            marker = next_marker
        return deleted

    def _delete_subtree(self, root):
        """Depth-first removal of root and its descendants, committed once."""
        # Walk the whole subtree before staging deletes so no query autoflushes a half-deleted tree
        subtree = []
        seen = set()
        stack = [root]
        while stack:
            record = stack.pop()
            if record.id in seen:
                continue
            seen.add(record.id)
            subtree.append(record)
            stack.extend(reversed(self.metadata.find_children(record.id)))

        # One statement for the whole subtree, so a corrupted parent cycle cannot block the flush
        self.metadata.delete_many([record.id for record in subtree])
        self.metadata.commit()
        return len(subtree)
