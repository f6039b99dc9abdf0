"""Helpers for base64 file uploads sent inside JSON bodies"""
import base64
import binascii
import io
import logging
import random
import string
import time

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_TYPES = ['image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp']


class InvalidUpload(ValueError):
    """Raised when an uploaded payload cannot be decoded or has the wrong type"""


def decode_data_uri(value):
    """
    Decode ``data:<mime>;base64,<payload>`` or a bare base64 string.
    Returns ``(mime_type or None, bytes)``.
    """
    if not isinstance(value, str) or not value:
        raise InvalidUpload('File data is empty')
    mime_type = None
    payload = value
    if value.startswith('data:'):
        header, _, payload = value.partition(',')
        mime_type = header[5:].split(';')[0] or None
    try:
        return mime_type, base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise InvalidUpload('File data is not valid base64')


def unique_filename(extension):
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{int(time.time() * 1000)}-{suffix}.{extension.lstrip('.')}"


def extension_for(mime_type, default='bin'):
    if not mime_type or '/' not in mime_type:
        return default
    return mime_type.split('/')[1].split('+')[0]


def verify_image(content):
    """Raise InvalidUpload unless Pillow can parse the bytes as an image"""
    try:
        with Image.open(io.BytesIO(content)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidUpload(f'File is not a valid image: {e}')


def save_image_upload(upload, folder='uploads'):
    """
    Store a ``{"fileData": ..., "fileType": ...}`` image upload.
    Returns the storage path relative to MEDIA_ROOT.
    """
    file_type = (upload.get('fileType') or '').lower()
    if file_type not in IMAGE_TYPES:
        raise InvalidUpload('Only images are allowed.')
    _, content = decode_data_uri(upload.get('fileData'))
    verify_image(content)
    path = default_storage.save(f"{folder}/{unique_filename(extension_for(file_type, 'jpg'))}", ContentFile(content))
    logger.info(f"Stored image upload at {path}")
    return path


def decode_upload(upload, default_mime='application/octet-stream', allowed_types=None):
    """
    Decode a ``{"fileData": ..., "fileType": ...}`` upload without storing it.
    Returns ``(mime_type, bytes)``.
    """
    if not isinstance(upload, dict):
        raise InvalidUpload('Upload must be an object with fileData and fileType')
    uri_mime, content = decode_data_uri(upload.get('fileData'))
    mime_type = (upload.get('fileType') or uri_mime or default_mime).lower()
    if allowed_types is not None and mime_type not in allowed_types:
        raise InvalidUpload(f'File type {mime_type} is not allowed')
    if mime_type in IMAGE_TYPES:
        verify_image(content)
    return mime_type, content
