"""
Exam authoring, the attempt state machine and MCQ scoring
"""
from datetime import timedelta
from types import SimpleNamespace
from unittest import mock

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Tenant, User
from activity.models import ActivityLog
from courses.test_progress import make_course
from .models import Exam, Question, ExamAttempt
from .services import score_answers


def make_exam(course, creator, exam_type=Exam.TYPE_MCQ, correct_options=(0, 1), **extra):
    exam = Exam.objects.create(
        title='Midterm', description='Chapters 1-4', course=course, exam_type=exam_type,
        tenant_id=course.tenant_id, created_by=creator, **extra
    )
    questions = [
        Question.objects.create(
            exam=exam, text=f'Question {i + 1}', order=i,
            options=['A', 'B', 'C'] if exam_type == Exam.TYPE_MCQ else [],
            correct_option=correct if exam_type == Exam.TYPE_MCQ else None,
        )
        for i, correct in enumerate(correct_options)
    ]
    return exam, questions


class ScoreAnswersTests(TestCase):

    def setUp(self):
        self.questions = [SimpleNamespace(id=1, correct_option=0), SimpleNamespace(id=2, correct_option=1)]

    def test_partial_and_full_marks(self):
        self.assertEqual(score_answers(self.questions, {'1': 0, '2': 0}), 50)
        self.assertEqual(score_answers(self.questions, {'1': 0, '2': 1}), 100)

    def test_empty_answers_score_zero(self):
        self.assertEqual(score_answers(self.questions, {}), 0)
        self.assertEqual(score_answers(self.questions, None), 0)

    def test_answers_must_be_integers(self):
        self.assertEqual(score_answers(self.questions, {'1': '0', '2': 1.0}), 0)
        self.assertEqual(score_answers(self.questions, {'1': False, '2': True}), 0)

    def test_exam_without_questions_scores_zero(self):
        self.assertEqual(score_answers([], {'1': 0}), 0)

    def test_rounding(self):
        questions = [SimpleNamespace(id=i, correct_option=0) for i in range(1, 4)]
        self.assertEqual(score_answers(questions, {'1': 0, '2': 0}), 67)


class ExamAttemptApiTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.student = User.objects.create_user('student', 'secret123', tenant=self.tenant)
        self.course, _ = make_course(self.tenant, self.admin)
        self.exam, self.questions = make_exam(self.course, self.admin, duration=30)
        self.client.force_authenticate(user=self.student)

    def start(self, exam=None):
        return self.client.post('/api/exam-attempts', {'examId': (exam or self.exam).id}, format='json')

    def submit(self, attempt_id, answers):
        return self.client.put(
            f'/api/exam-attempts/{attempt_id}',
            {'answers': answers, 'completedAt': timezone.now().isoformat()},
            format='json',
        )

    def test_scenario_scores(self):
        q1, q2 = (q.id for q in self.questions)
        self.exam.max_attempts = 3
        self.exam.save()

        attempt = self.start().data
        self.assertEqual(attempt['status'], ExamAttempt.STATUS_IN_PROGRESS)
        self.assertEqual(attempt['duration'], 30)
        self.assertEqual(self.submit(attempt['id'], {str(q1): 0, str(q2): 0}).data['score'], 50)

        attempt = self.start().data
        self.assertEqual(self.submit(attempt['id'], {str(q1): 0, str(q2): 1}).data['score'], 100)

        # Timer ran out with nothing answered
        attempt = self.start().data
        response = self.submit(attempt['id'], {})
        self.assertEqual(response.data['score'], 0)
        self.assertEqual(response.data['answers'], {})
        self.assertIsNotNone(response.data['completedAt'])
        self.assertEqual(response.data['status'], ExamAttempt.STATUS_COMPLETED)

    def test_max_attempts_creates_no_row(self):
        self.assertEqual(self.start().status_code, status.HTTP_201_CREATED)

        response = self.start()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Maximum attempts reached for this exam')
        self.assertEqual(ExamAttempt.objects.filter(user=self.student, exam=self.exam).count(), 1)

    def test_start_and_submit_are_logged(self):
        attempt = self.start().data
        self.submit(attempt['id'], {})

        types = set(ActivityLog.objects.filter(user=self.student).values_list('activity_type', flat=True))
        self.assertEqual(types, {ActivityLog.EXAM_START, ActivityLog.EXAM_COMPLETE})

    def test_second_submission_is_rejected(self):
        attempt = self.start().data
        q1 = self.questions[0].id
        self.submit(attempt['id'], {str(q1): 0})

        response = self.submit(attempt['id'], {str(q1): 1})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ExamAttempt.objects.get(id=attempt['id']).answers, {str(q1): 0})

    def test_submission_needs_completed_at(self):
        attempt = self.start().data

        response = self.client.put(f"/api/exam-attempts/{attempt['id']}", {'answers': {}}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('completedAt', response.data['errors'])
        self.assertIsNone(ExamAttempt.objects.get(id=attempt['id']).completed_at)

    def test_closed_exam_refuses_new_attempts(self):
        self.exam.accepting_responses = False
        self.exam.save()

        response = self.start()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ExamAttempt.objects.exists())

    def test_access_window_is_reported_not_enforced(self):
        self.exam.start_time = timezone.now() + timedelta(days=1)
        self.exam.save()

        self.assertFalse(self.client.get(f'/api/exams/{self.exam.id}').data['isOpen'])
        self.assertEqual(self.start().status_code, status.HTTP_201_CREATED)

    def test_late_submission_is_accepted_and_flagged(self):
        attempt = self.start().data
        ExamAttempt.objects.filter(id=attempt['id']).update(started_at=timezone.now() - timedelta(hours=2))

        listing = self.client.get('/api/exam-attempts/user').data
        self.assertEqual(listing[0]['status'], ExamAttempt.STATUS_EXPIRED)

        response = self.submit(attempt['id'], {})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['isLate'])

    def test_other_students_attempt_is_forbidden(self):
        attempt = self.start().data
        intruder = User.objects.create_user('intruder', 'secret123', tenant=self.tenant)
        self.client.force_authenticate(user=intruder)

        response = self.submit(attempt['id'], {})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this exam attempt')

    def test_exam_of_other_tenant_cannot_be_started(self):
        north = Tenant.objects.create(name='North Campus', subdomain='north')
        north_admin = User.objects.create_user('north', 'secret123', role=User.ROLE_ADMIN, tenant=north)
        north_course, _ = make_course(north, north_admin)
        north_exam, _ = make_exam(north_course, north_admin)

        response = self.start(north_exam)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied to this exam')
        self.assertFalse(ExamAttempt.objects.filter(exam=north_exam).exists())

    def test_results_only_list_completed_attempts(self):
        self.exam.max_attempts = 2
        self.exam.save()
        done = self.start().data
        self.submit(done['id'], {})
        self.start()

        response = self.client.get('/api/student/exam-results')

        self.assertEqual([r['id'] for r in response.data], [done['id']])
        self.assertEqual(response.data[0]['examTitle'], 'Midterm')


class WrittenExamReviewTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.student = User.objects.create_user('student', 'secret123', tenant=self.tenant)
        course, _ = make_course(self.tenant, self.admin)
        self.exam, self.questions = make_exam(course, self.admin, exam_type=Exam.TYPE_WRITTEN)

    def test_written_exam_is_not_scored_and_gets_reviewed(self):
        self.client.force_authenticate(user=self.student)
        attempt = self.client.post('/api/exam-attempts', {'examId': self.exam.id}, format='json').data
        answers = {str(q.id): 'My essay answer' for q in self.questions}
        submitted = self.client.put(
            f"/api/exam-attempts/{attempt['id']}",
            {'answers': answers, 'completedAt': timezone.now().isoformat()},
            format='json',
        ).data
        self.assertIsNone(submitted['score'])

        self.client.force_authenticate(user=self.admin)
        pending = self.client.get('/api/admin/exam-attempts?pending=true').data
        self.assertEqual([p['id'] for p in pending], [attempt['id']])

        response = self.client.put(
            f"/api/admin/exam-attempts/{attempt['id']}/grade", {'feedback': 'Well argued'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['feedback'], 'Well argued')
        self.assertIsNotNone(response.data['reviewedAt'])

        self.assertEqual(self.client.get('/api/admin/exam-attempts?pending=true').data, [])

    def test_unsubmitted_attempt_cannot_be_graded(self):
        attempt = ExamAttempt.objects.create(user=self.student, exam=self.exam)
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(
            f'/api/admin/exam-attempts/{attempt.id}/grade', {'feedback': 'Too early'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Only submitted attempts can be graded')


class QuestionApiTests(APITestCase):

    def setUp(self):
        self.tenant = Tenant.default()
        self.admin = User.objects.create_user('admin', 'secret123', role=User.ROLE_ADMIN, tenant=self.tenant)
        self.student = User.objects.create_user('student', 'secret123', tenant=self.tenant)
        self.course, _ = make_course(self.tenant, self.admin)
        self.exam, self.questions = make_exam(self.course, self.admin)

    def test_students_do_not_see_correct_options(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(f'/api/exams/{self.exam.id}/questions')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(all('correctOption' not in q for q in response.data))

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(f'/api/exams/{self.exam.id}/questions')
        self.assertEqual([q['correctOption'] for q in response.data], [0, 1])

    def test_question_added_at_the_end_by_default(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            f'/api/exams/{self.exam.id}/questions',
            {'text': 'Third?', 'options': ['yes', 'no'], 'correctOption': 1},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order'], 2)

    def test_mcq_question_needs_a_valid_correct_option(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            '/api/questions',
            {'examId': self.exam.id, 'text': 'Broken', 'options': ['only one'], 'correctOption': 3},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.exam.questions.count(), 2)

    def test_replace_swaps_the_whole_set(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(f'/api/exams/{self.exam.id}/questions', [
            {'text': 'New 1', 'options': ['a', 'b'], 'correctOption': 0},
            {'text': 'New 2', 'options': ['a', 'b'], 'correctOption': 1},
            {'text': 'New 3', 'options': ['a', 'b'], 'correctOption': 1},
        ], format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([q['text'] for q in response.data], ['New 1', 'New 2', 'New 3'])
        self.assertEqual([q['order'] for q in response.data], [0, 1, 2])
        self.assertFalse(Question.objects.filter(id__in=[q.id for q in self.questions]).exists())

    def test_invalid_replace_keeps_old_questions(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(f'/api/exams/{self.exam.id}/questions', [
            {'text': 'Fine', 'options': ['a', 'b'], 'correctOption': 0},
            {'text': 'Broken', 'options': ['a'], 'correctOption': 0},
        ], format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            list(self.exam.questions.values_list('id', flat=True)), [q.id for q in self.questions]
        )

    def test_replace_failure_rolls_back(self):
        self.client.force_authenticate(user=self.admin)

        with mock.patch.object(Question.objects, 'bulk_create', side_effect=RuntimeError('db went away')):
            response = self.client.put(f'/api/exams/{self.exam.id}/questions', [
                {'text': 'Lost', 'options': ['a', 'b'], 'correctOption': 0},
            ], format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Internal server error'})
        self.assertEqual(self.exam.questions.count(), 2)

    def test_clear_questions(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/exams/{self.exam.id}/questions')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.exam.questions.count(), 0)

    def test_exam_for_foreign_course_is_rejected(self):
        north = Tenant.objects.create(name='North Campus', subdomain='north')
        north_admin = User.objects.create_user('north', 'secret123', role=User.ROLE_ADMIN, tenant=north)
        north_course, _ = make_course(north, north_admin)
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/exams', {
            'title': 'Sneaky', 'description': 'x', 'courseId': north_course.id,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Exam.objects.filter(title='Sneaky').exists())

    def test_exam_crud(self):
        self.client.force_authenticate(user=self.admin)

        created = self.client.post('/api/exams', {
            'title': 'Final', 'description': 'Everything', 'courseId': self.course.id,
            'examType': Exam.TYPE_WRITTEN, 'duration': 45, 'maxAttempts': 2,
        }, format='json')
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data['tenantId'], self.tenant.id)
        self.assertEqual(created.data['questionCount'], 0)

        updated = self.client.put(f"/api/exams/{created.data['id']}", {'duration': 60}, format='json')
        self.assertEqual(updated.data['duration'], 60)
        self.assertEqual(updated.data['title'], 'Final')

        bad_window = self.client.put(f"/api/exams/{created.data['id']}", {
            'startTime': '2026-05-02T10:00:00Z', 'endTime': '2026-05-01T10:00:00Z',
        }, format='json')
        self.assertEqual(bad_window.status_code, status.HTTP_400_BAD_REQUEST)

        deleted = self.client.delete(f"/api/exams/{created.data['id']}")
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
