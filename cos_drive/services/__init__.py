# cos_drive/services/__init__.py
from flask import current_app
from .metadata_store import FileRecordStore
from .path_resolver import PathResolver
from .upload_service import UploadService
from .folder_service import FolderService
from .multipart_service import MultipartService


def get_cos_store():
    """The process-wide CosStore created by create_app()."""
    return current_app.extensions['cos_store']

def path_resolver(metadata=None):
    return PathResolver(metadata or FileRecordStore(), max_depth=current_app.config['PATH_MAX_DEPTH'])

def upload_service():
    metadata = FileRecordStore()
    return UploadService(
        get_cos_store(),
        metadata,
        path_resolver(metadata),
        max_size=current_app.config['MAX_UPLOAD_SIZE'],
        store_path=current_app.config.get('STORE_PATH', ''),
    )

def folder_service():
    metadata = FileRecordStore()
    return FolderService(
        get_cos_store(),
        metadata,
        path_resolver(metadata),
        page_size=current_app.config['COS_LIST_PAGE_SIZE'],
    )

def multipart_service():
    return MultipartService(
        get_cos_store(),
        max_chunk_size=current_app.config['MAX_UPLOAD_SIZE'],
        store_path=current_app.config.get('STORE_PATH', ''),
    )
