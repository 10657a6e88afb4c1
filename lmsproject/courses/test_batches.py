"""
Tenant isolation on course content and the batch -> course enrollment cascade
"""
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Tenant, User
from .models import Course, Module, Enrollment, Batch, BatchEnrollment
from .test_progress import make_course


class TenantIsolationTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.other_tenant = Tenant.objects.create(name='North Campus', subdomain='north')
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.other_admin = User.objects.create_user(
            'north-admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.other_tenant
        )
        self.course, self.lessons = make_course(self.other_tenant, self.other_admin)

    def test_foreign_course_update_is_forbidden_and_untouched(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(f'/api/courses/{self.course.id}', {'title': 'Taken over'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this course')
        self.course.refresh_from_db()
        self.assertEqual(self.course.title, 'Data Structures')

    def test_foreign_course_delete_is_forbidden(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/courses/{self.course.id}')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Course.objects.filter(id=self.course.id).exists())

    def test_module_cannot_be_added_to_foreign_course(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            '/api/modules', {'title': 'Injected', 'courseId': self.course.id, 'order': 9}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Module.objects.filter(title='Injected').exists())

    def test_foreign_lesson_is_forbidden(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(f'/api/lessons/{self.lessons[0].id}')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this lesson')

    def test_course_list_is_tenant_scoped(self):
        own, _ = make_course(self.tenant, self.admin)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/courses')

        self.assertEqual([c['id'] for c in response.data], [own.id])

    def test_missing_course_is_not_found(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/courses/424242')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Course not found')


class CourseVisibilityTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.student = User.objects.create_user('student', 'secret123', tenant=self.tenant)
        self.free_course, _ = make_course(self.tenant, self.admin, enrollment_required=False)
        self.gated_course, _ = make_course(self.tenant, self.admin, enrollment_required=True)

    def test_student_sees_free_courses_and_enrolled_ones(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.get('/api/courses')
        self.assertEqual([c['id'] for c in response.data], [self.free_course.id])

        response = self.client.get(f'/api/courses/{self.gated_course.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        Enrollment.objects.create(user=self.student, course=self.gated_course)
        response = self.client.get(f'/api/courses/{self.gated_course.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_students_cannot_author(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.post('/api/courses', {
            'title': 'Mine', 'description': '-', 'category': '-', 'difficulty': '-', 'duration': 1,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Forbidden: Admin access required')

    def test_admin_creates_course_in_own_tenant(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/courses', {
            'title': 'Algorithms', 'description': 'Sorting and searching', 'category': 'CS',
            'difficulty': 'advanced', 'duration': 12,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenantId'], self.tenant.id)
        self.assertEqual(response.data['createdBy'], self.admin.id)


class BatchEnrollmentTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.other_tenant = Tenant.objects.create(name='North Campus', subdomain='north')
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.trainer = User.objects.create_user('trainer', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.students = [
            User.objects.create_user(f'student{i}', 'secret123', tenant=self.tenant) for i in range(3)
        ]
        self.outsider = User.objects.create_user('outsider', 'secret123', tenant=self.other_tenant)
        self.course, _ = make_course(self.tenant, self.admin)
        self.client.force_authenticate(user=self.admin)

    def create_batch(self, **overrides):
        data = {
            'name': 'Morning cohort', 'courseId': self.course.id, 'trainerId': self.trainer.id,
            'startDate': '2026-01-12', 'batchTime': '09:00-11:00',
        }
        data.update(overrides)
        return self.client.post('/api/batches', data, format='json')

    def test_batch_code_is_generated(self):
        response = self.create_batch()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertRegex(response.data['batchCode'], r'^B\d{3}\d{6}$')
        self.assertTrue(response.data['batchCode'].startswith(f'B{self.course.id:03d}'))

    def test_trainer_from_other_tenant_is_rejected(self):
        response = self.create_batch(trainerId=self.outsider.id)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this trainer')
        self.assertFalse(Batch.objects.exists())

    def test_instructor_from_other_tenant_is_rejected(self):
        response = self.client.post('/api/courses', {
            'title': 'Borrowed', 'description': '-', 'category': '-', 'difficulty': '-', 'duration': 1,
            'instructorId': self.outsider.id,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this instructor')
        self.assertFalse(Course.objects.filter(title='Borrowed').exists())

        response = self.client.put(
            f'/api/courses/{self.course.id}', {'instructorId': self.outsider.id}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.course.refresh_from_db()
        self.assertIsNone(self.course.instructor_id)

    def test_instructor_from_own_tenant_is_accepted(self):
        response = self.client.put(
            f'/api/courses/{self.course.id}', {'instructorId': self.trainer.id}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['instructorId'], self.trainer.id)

    def test_batch_enrollment_creates_course_enrollment_once(self):
        batch_id = self.create_batch().data['id']
        student = self.students[0]
        Enrollment.objects.create(user=student, course=self.course)

        first = self.client.post('/api/batch-enrollments', {'batchId': batch_id, 'userId': student.id}, format='json')
        second = self.client.post('/api/batch-enrollments', {'batchId': batch_id, 'userId': student.id}, format='json')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(BatchEnrollment.objects.filter(user=student).count(), 1)
        self.assertEqual(Enrollment.objects.filter(user=student, course=self.course).count(), 1)

    def test_bulk_enrollment_cascades_to_course(self):
        batch_id = self.create_batch().data['id']
        ids = [s.id for s in self.students]

        response = self.client.post(
            '/api/batch-enrollments/bulk', {'batchId': batch_id, 'userIds': ids + ids[:1]}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 3)
        self.assertEqual(Enrollment.objects.filter(course=self.course).count(), 3)

    def test_bulk_enrollment_with_foreign_user_writes_nothing(self):
        batch_id = self.create_batch().data['id']
        ids = [s.id for s in self.students] + [self.outsider.id]

        response = self.client.post('/api/batch-enrollments/bulk', {'batchId': batch_id, 'userIds': ids}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(BatchEnrollment.objects.exists())
        self.assertFalse(Enrollment.objects.exists())

    def test_leaving_batch_keeps_course_enrollment(self):
        batch_id = self.create_batch().data['id']
        student = self.students[0]
        row = self.client.post(
            '/api/batch-enrollments', {'batchId': batch_id, 'userId': student.id}, format='json'
        ).data

        response = self.client.delete(f"/api/batch-enrollments/{row['id']}")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(BatchEnrollment.objects.filter(id=row['id']).exists())
        self.assertTrue(Enrollment.objects.filter(user=student, course=self.course).exists())

    def test_students_cannot_manage_batches(self):
        self.client.force_authenticate(user=self.students[0])

        response = self.client.get('/api/batches')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
