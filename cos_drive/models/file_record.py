from datetime import datetime, timezone
from cos_drive.extensions import db

class FileRecord(db.Model):
    """A file or folder mirrored from the COS bucket, linked into a tree by parent_id"""
    __tablename__ = 'file_records'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(100), nullable=False) # 'Folder' or the file's content type
    size = db.Column(db.BigInteger, default=0, nullable=False)
    bucket = db.Column(db.String(100), nullable=False)
    key = db.Column(db.String(1024), nullable=False, index=True)
    store_response = db.Column(db.JSON) # COS acknowledgement headers, kept for audit
    parent_id = db.Column(db.Integer, db.ForeignKey('file_records.id'), index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    FOLDER = 'Folder'

    # Self-referential relationship for the folder tree
    children = db.relationship(
        'FileRecord',
        foreign_keys=[parent_id],
        backref=db.backref('parent', remote_side=[id]),
        lazy='dynamic'
    )

    __table_args__ = (
        db.CheckConstraint(
            'parent_id IS NULL OR parent_id != id',
            name='ck_file_records_valid_parent'
        ),
    )

    @property
    def is_folder(self):
        return self.type == FileRecord.FOLDER

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'size': self.size,
            'bucket': self.bucket,
            'key': self.key,
            'parent_id': self.parent_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
