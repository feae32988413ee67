# cos_drive/models/__init__.py
from .file_record import FileRecord
