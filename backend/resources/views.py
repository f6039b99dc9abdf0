import json
import logging
import uuid

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.core.files.base import ContentFile
from django.http import FileResponse
from django.shortcuts import get_object_or_404
from .models import Resource, RESOURCE_TYPES
from .serializers import ResourceSerializer
from backend.core.files import decode_upload, InvalidUpload
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def _class_id_list(value):
    """classIds may arrive as a list or as a JSON-encoded list"""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = [value]
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [str(item) for item in value]


def _file_response(resource, as_attachment):
    if not resource.file or not resource.file.storage.exists(resource.file.name):
        return Response({'error': 'File not found'}, status=status.HTTP_404_NOT_FOUND)
    filename = resource.file.name.rsplit('/', 1)[-1]
    return FileResponse(
        resource.file.open('rb'),
        as_attachment=as_attachment,
        filename=filename,
        content_type=resource.file_type or 'application/octet-stream'
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def resource_list_create(request):
    """List resources or upload a new one"""
    if request.method == 'GET':
        serializer = ResourceSerializer(Resource.objects.all(), many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'upload_resource'):
            return privilege_denied('upload_resource')
        data = request.data
        required = ['title', 'fileType', 'fileData', 'classIds', 'uploadedBy']
        if any(not data.get(field) for field in required):
            return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)

        file_type = data['fileType']
        if file_type not in RESOURCE_TYPES:
            return Response({'error': 'File type not allowed'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            file_type, content = decode_upload(
                {'fileData': data['fileData'], 'fileType': file_type},
                allowed_types=RESOURCE_TYPES
            )
        except InvalidUpload as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        resource = Resource(
            title=data['title'],
            file_type=file_type,
            class_ids=_class_id_list(data['classIds']),
            uploaded_by=str(data['uploadedBy'])
        )
        resource.file.save(f"{uuid.uuid4()}.{RESOURCE_TYPES[file_type]}", ContentFile(content), save=False)
        resource.save()
        logger.info(f"Resource {resource.id} uploaded ({file_type}, {len(content)} bytes)")
        create_audit_log(
            request=request,
            action='create',
            model_name='Resource',
            object_id=resource.id,
            object_name=resource.title,
            changes={'classIds': resource.class_ids}
        )
        return Response(ResourceSerializer(resource).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def resource_by_class(request, class_id):
    """Resources shared with one class"""
    resources = [resource for resource in Resource.objects.all() if resource.is_for_class(class_id)]
    return Response(ResourceSerializer(resources, many=True).data)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def resource_detail(request, pk):
    """Retrieve or delete a resource"""
    resource = get_object_or_404(Resource, pk=pk)

    if request.method == 'GET':
        return Response(ResourceSerializer(resource).data)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_resource'):
            return privilege_denied('delete_resource')
        create_audit_log(
            request=request,
            action='delete',
            model_name='Resource',
            object_id=resource.id,
            object_name=resource.title
        )
        if resource.file:
            resource.file.delete(save=False)
        resource.delete()
        return Response({'success': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('download_resource')])
def resource_download(request, pk):
    """Download the stored file as an attachment"""
    resource = get_object_or_404(Resource, pk=pk)
    return _file_response(resource, as_attachment=True)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('view_resources')])
def resource_preview(request, pk):
    """Serve the stored file inline"""
    resource = get_object_or_404(Resource, pk=pk)
    return _file_response(resource, as_attachment=False)
