from flask import current_app
from cos_drive.extensions import db
from cos_drive.exceptions import NotFound
from cos_drive.models.file_record import FileRecord


class FileRecordStore:
    """Create/read/delete access to the FileRecord tree"""

    def __init__(self, session=None):
        self.session = session or db.session

    def create(self, record):
        self.session.add(record)
        try:
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            current_app.logger.error(f"Database error creating file record for key {record.key}: {e}")
            raise
        current_app.logger.info(f"Created file record {record.id} for key {record.key}")
        return record

    def find_by_id(self, record_id):
        record = self.session.get(FileRecord, record_id)
        if record is None:
            raise NotFound(f"File record {record_id} not found")
        return record

    def find_children(self, parent_id):
        return FileRecord.query.filter_by(parent_id=parent_id).order_by(FileRecord.id).all()

    def find_by_key(self, bucket, key):
        return FileRecord.query.filter_by(bucket=bucket, key=key).all()

    def delete(self, record):
        """Stage a delete; the caller commits once the whole change is staged."""
        self.session.delete(record)

    def delete_many(self, record_ids):
        """Stage a single DELETE for all ids; the caller commits."""
        if not record_ids:
            return 0
        return self.session.query(FileRecord).filter(FileRecord.id.in_(record_ids)).delete(synchronize_session='fetch')

    def commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
