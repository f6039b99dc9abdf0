"""
Comprehensive test suite for Resources module
Tests: Uploads, type checks, class filtering, download, preview and deletion
"""
import shutil
import tempfile

from django.test import TestCase, override_settings
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.resources.models import Resource

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ResourceTests(TestCase):
    """Test resource endpoints"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.uploader = TestDataFactory.create_user(role='SUPER_TEACHER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.uploader)

    def upload(self, title='Algebra notes', class_ids=None, file_type='text/plain', file_data=None):
        data = {
            'title': title,
            'fileType': file_type,
            'fileData': file_data or TestDataFactory.text_data_uri('x + y = z'),
            'classIds': class_ids if class_ids is not None else ['1', '2'],
            'uploadedBy': str(self.uploader.id),
        }
        return self.client.post('/api/v1/resources/', data, format='json')

    def test_upload(self):
        response = self.upload()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        resource = Resource.objects.get()
        self.assertTrue(resource.file.name.endswith('.txt'))
        self.assertEqual(resource.class_ids, ['1', '2'])

    def test_class_ids_as_json_string(self):
        response = self.upload(class_ids='[3, 4]')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Resource.objects.get().class_ids, ['3', '4'])

    def test_missing_fields(self):
        response = self.client.post('/api/v1/resources/', {'title': 'Only a title'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')

    def test_type_not_allowed(self):
        response = self.upload(file_type='application/x-msdownload')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'File type not allowed')

    def test_image_checked(self):
        response = self.upload(file_type='image/png', file_data=TestDataFactory.text_data_uri('not a png'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.upload(file_type='image/png', file_data=TestDataFactory.png_data_uri())
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_teacher_cannot_upload(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)
        response = self.upload()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_by_class(self):
        self.upload(title='Shared', class_ids=['1', '2'])
        self.upload(title='Other', class_ids=['5'])
        response = self.client.get('/api/v1/resources/class/2/')
        self.assertEqual([r['title'] for r in response.data], ['Shared'])

    def test_download_and_preview(self):
        self.upload()
        resource = Resource.objects.get()
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)

        response = self.client.get(f'/api/v1/resources/{resource.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Disposition'].startswith('attachment'))
        self.assertEqual(b''.join(response.streaming_content), b'x + y = z')
        response.close()

        response = self.client.get(f'/api/v1/resources/{resource.id}/preview/')
        self.assertTrue(response['Content-Disposition'].startswith('inline'))
        response.close()

    def test_missing_file(self):
        self.upload()
        resource = Resource.objects.get()
        resource.file.delete(save=False)
        response = self.client.get(f'/api/v1/resources/{resource.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'File not found')

    def test_delete_removes_file(self):
        self.upload()
        resource = Resource.objects.get()
        storage, name = resource.file.storage, resource.file.name
        admin = TestDataFactory.create_user(role='ADMIN')
        self.client.authenticate_user(admin)
        response = self.client.delete(f'/api/v1/resources/{resource.id}/')
        self.assertEqual(response.data, {'success': True})
        self.assertFalse(storage.exists(name))
        self.assertFalse(Resource.objects.exists())
