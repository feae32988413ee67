from flask import Blueprint, Response, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from cos_drive.exceptions import DriveError, StoreError
from cos_drive.services import get_cos_store, path_resolver, upload_service, folder_service, multipart_service

bp = Blueprint('cos', __name__, url_prefix='/cos')

STREAM_CHUNK_SIZE = 64 * 1024


def _error_response(e):
    body = {"error": e.message}
    status_code = e.status_code
    if isinstance(e, StoreError):
        if e.code:
            body["code"] = e.code
        if e.store_status == 404:
            status_code = 404
    return jsonify(body), status_code

def _stream_body(body):
    """Yield the object in chunks, releasing the connection even if the client goes away."""
    try:
        for chunk in body.get_stream(chunk_size=STREAM_CHUNK_SIZE):
            yield chunk
    finally:
        body.get_raw_stream().close()

def _optional_int(value, field):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        raise DriveError(f"{field} must be an integer", status_code=400)

def _key_from_body():
    data = request.get_json(silent=True) or {}
    return data.get('key')


@bp.app_errorhandler(413)
def request_too_large(e):
    return jsonify({"error": "Request body exceeds the upload size limit"}), 413


@bp.route('', methods=['POST'])
@jwt_required()
def upload_file():
    """Flat upload, sorted under STORE_PATH by MIME category"""
    file = request.files.get('file')
    if not file or not file.filename:
        return jsonify({"error": "The 'file' is required in request body"}), 400

    try:
        data = file.read()
        result = upload_service().upload_categorised(data, file.filename, file.mimetype, len(data))
        return jsonify(result), 201
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Upload error for {file.filename}: {str(e)}", exc_info=True)
        return jsonify({"error": "Upload File Failed"}), 500


@bp.route('', methods=['GET'])
@jwt_required()
def get_file():
    """Stream an object back by key"""
    key = request.args.get('key')
    if not key:
        return jsonify({"error": "key required"}), 400

    try:
        resp = get_cos_store().get_object(key)
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Download error for {key}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to get file"}), 500

    return Response(
        _stream_body(resp['Body']),
        mimetype=resp.get('Content-Type') or 'application/octet-stream',
    )


@bp.route('/preview', methods=['POST'])
@jwt_required()
def get_file_preview():
    """Signed, time-limited download URL for a key"""
    key = _key_from_body()
    if not key:
        return jsonify({"error": "key required"}), 400

    try:
        url = get_cos_store().signed_url(key, current_app.config['COS_SIGNED_URL_EXPIRES'])
        return jsonify({"url": url}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Preview error for {key}: {str(e)}", exc_info=True)
        return jsonify({"error": "Preview Failed"}), 500


@bp.route('/delete', methods=['POST'])
@jwt_required()
def delete_by_key():
    key = _key_from_body()
    if not key:
        return jsonify({"error": "key required"}), 400

    try:
        folder_service().delete_by_key(key)
        return jsonify({"message": "File deleted", "key": key}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Delete error for {key}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete file"}), 500


# --- Folder tree ---

@bp.route('/files', methods=['POST'])
@jwt_required()
def upload_tree_file():
    """Upload into a folder (parent_id), under an explicit path, or at the bucket root"""
    file = request.files.get('file')
    if not file or not file.filename:
        return jsonify({"error": "The 'file' is required in request body"}), 400

    try:
        parent_id = _optional_int(request.form.get('parent_id'), 'parent_id')
        data = file.read()
        result = upload_service().upload_file(
            data,
            file.filename,
            content_type=file.mimetype,
            size=len(data),
            parent_id=parent_id,
            path_prefix=request.form.get('path'),
        )
        return jsonify(result), 201
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Upload error for {file.filename}: {str(e)}", exc_info=True)
        return jsonify({"error": "Upload File Failed"}), 500


@bp.route('/files/<int:file_id>', methods=['GET'])
@jwt_required()
def get_file_record(file_id):
    try:
        resolver = path_resolver()
        record = resolver.metadata.find_by_id(file_id)
        data = record.to_dict()
        data['path'] = resolver.resolve_path_string(file_id)
        data['url'] = get_cos_store().object_url(record.key)
        return jsonify(data), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error reading file record {file_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to get file record"}), 500


@bp.route('/files/<int:file_id>', methods=['DELETE'])
@jwt_required()
def delete_file(file_id):
    try:
        folder_service().delete_file(file_id)
        return jsonify({"message": "File deleted"}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error deleting file {file_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete file"}), 500


@bp.route('/folders', methods=['POST'])
@jwt_required()
def create_folder():
    data = request.get_json(silent=True)
    if not data or not data.get('name'):
        return jsonify({"error": "Folder name required"}), 400

    try:
        parent_id = _optional_int(data.get('parent_id'), 'parent_id')
        folder = folder_service().create_folder(data['name'], parent_id=parent_id)
        return jsonify(folder.to_dict()), 201
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error creating folder {data.get('name')}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to create folder"}), 500


@bp.route('/folders', methods=['GET'])
@bp.route('/folders/<int:folder_id>', methods=['GET'])
@jwt_required()
def list_folder(folder_id=None):
    """Folder contents plus the breadcrumb path from the root"""
    try:
        chain, children = folder_service().list_folder(folder_id)
        return jsonify({
            "folder": chain[-1].to_dict() if chain else None,
            "path": [record.to_dict() for record in chain],
            "children": [child.to_dict() for child in children],
        }), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error listing folder {folder_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to list folder"}), 500


@bp.route('/folders/<int:folder_id>', methods=['DELETE'])
@jwt_required()
def delete_folder(folder_id):
    try:
        folder_service().delete_folder(folder_id)
        return jsonify({"message": "Folder deleted"}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error deleting folder {folder_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete folder"}), 500


# --- Multipart upload ---

@bp.route('/initMultipartUpload', methods=['POST'])
@jwt_required()
def init_multipart_upload():
    data = request.get_json(silent=True) or {}

    try:
        service = multipart_service()
        key = data.get('key') or service.build_large_key(data.get('fileName'))
        upload_id = service.initiate(key)
        return jsonify({"key": key, "uploadId": upload_id}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error initiating multipart upload: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to initiate multipart upload"}), 500


@bp.route('/uploadPart', methods=['POST'])
@jwt_required()
def upload_part():
    chunk = request.files.get('chunk')
    if not chunk:
        return jsonify({"error": "The 'chunk' is required in request body"}), 400

    key = request.form.get('key')
    upload_id = request.form.get('uploadId')
    part_number = request.form.get('partNumber')

    try:
        number = _optional_int(part_number, 'partNumber')
        if number is None:
            return jsonify({"error": "partNumber required"}), 400
        etag = multipart_service().upload_part(key, upload_id, number, chunk.read())
        return jsonify({"eTag": etag, "partNumber": part_number}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error uploading part {part_number} of {upload_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to upload part"}), 500


@bp.route('/completeMultipartUpload', methods=['POST'])
@jwt_required()
def complete_multipart_upload():
    data = request.get_json(silent=True) or {}
    key = data.get('key')
    upload_id = data.get('uploadId')

    try:
        location = multipart_service().complete(key, upload_id, data.get('parts'))
        return jsonify({"key": key, "location": location}), 200
    except DriveError as e:
        return _error_response(e)
    except Exception as e:
        current_app.logger.error(f"Error completing multipart upload {upload_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to complete multipart upload"}), 500
