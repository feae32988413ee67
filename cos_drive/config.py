# cos_drive/config.py
import os
from dotenv import load_dotenv

# Load .env from the root project directory
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '..', '.env'))

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'your_default_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'postgresql:///cos_drive')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration (tokens are issued by the auth service, we only verify them)
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'your_jwt_secret_key')

    # Tencent Cloud COS Credentials
    COS_SECRET_ID = os.getenv('COS_SECRET_ID')
    COS_SECRET_KEY = os.getenv('COS_SECRET_KEY')
    COS_REGION = os.getenv('COS_REGION', 'ap-guangzhou')
    COS_BUCKET = os.getenv('COS_BUCKET', 'newbie-cos-bucket-001')
    COS_PUBLIC_URL = os.getenv('COS_PUBLIC_URL') or (
        f'https://{os.getenv("COS_BUCKET", "newbie-cos-bucket-001")}.cos.{os.getenv("COS_REGION", "ap-guangzhou")}.myqcloud.com'
    )

    # Prefix for the flat /cos uploads and multipart uploads
    STORE_PATH = os.getenv('STORE_PATH', 'newbie-cos-path')

    # Upload limits (per whole-file upload and per multipart chunk)
    MAX_UPLOAD_SIZE = int(os.getenv('MAX_UPLOAD_SIZE', 10 * 1024 * 1024))
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024  # room for the multipart form envelope

    # COS behaviour
    COS_SIGNED_URL_EXPIRES = int(os.getenv('COS_SIGNED_URL_EXPIRES', 3600))
    COS_LIST_PAGE_SIZE = int(os.getenv('COS_LIST_PAGE_SIZE', 1000))  # COS caps MaxKeys at 1000

    # Folder tree
    PATH_MAX_DEPTH = int(os.getenv('PATH_MAX_DEPTH', 64))
