"""
Exam attempt state machine and question management.

    NotStarted --start--> InProgress --submit--> Completed

Start is refused once the user has used up ``max_attempts`` or when the
exam no longer accepts responses. Submit happens exactly once; MCQ exams
are scored right away, written exams wait for an admin review.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from activity.models import ActivityLog
from activity.services import log_activity
from courses.services import percentage
from .models import ExamAttempt, Question

logger = logging.getLogger(__name__)


class AttemptError(Exception):
    """An attempt transition that is not allowed in the current state."""


class MaxAttemptsReached(AttemptError):
    def __init__(self):
        super().__init__('Maximum attempts reached for this exam')


class ExamClosed(AttemptError):
    def __init__(self):
        super().__init__('This exam is not accepting responses')


class AttemptAlreadySubmitted(AttemptError):
    def __init__(self):
        super().__init__('This exam attempt has already been submitted')


class AttemptNotSubmitted(AttemptError):
    def __init__(self):
        super().__init__('Only submitted attempts can be graded')


def _answer_for(answers, question_id):
    # JSON object keys arrive as strings
    if str(question_id) in answers:
        return answers[str(question_id)]
    return answers.get(question_id)


def score_answers(questions, answers):
    """
    Percentage of questions whose submitted option index equals the
    correct one. Unanswered and wrong answers count as incorrect, an
    exam without questions scores 0.
    """
    questions = list(questions)
    answers = answers or {}
    correct = 0
    for question in questions:
        answer = _answer_for(answers, question.id)
        if isinstance(answer, bool) or not isinstance(answer, int):
            continue
        if question.correct_option is not None and answer == question.correct_option:
            correct += 1
    return percentage(correct, len(questions))


class ExamAttemptService:

    @staticmethod
    def start_attempt(user, exam):
        """Create a new in-progress attempt for ``user``."""
        if exam.accepting_responses is False:
            raise ExamClosed()

        User = get_user_model()
        with transaction.atomic():
            # Serialises concurrent starts by the same user
            User.objects.select_for_update().filter(id=user.id).first()
            used = ExamAttempt.objects.filter(user=user, exam=exam).count()
            if used >= exam.max_attempts:
                raise MaxAttemptsReached()
            attempt = ExamAttempt.objects.create(user=user, exam=exam, started_at=timezone.now())
            log_activity(user, ActivityLog.EXAM_START, exam.id, 'exam')

        logger.info("User %s started exam %s (attempt %s of %s)", user.id, exam.id, used + 1, exam.max_attempts)
        return attempt

    @staticmethod
    def submit_attempt(attempt, answers):
        """
        Finalise an attempt. Used for manual submission and for the
        auto-submit when the timer runs out (possibly with no answers).
        """
        exam = attempt.exam
        with transaction.atomic():
            attempt = ExamAttempt.objects.select_for_update().select_related('exam').get(id=attempt.id)
            if attempt.is_completed:
                raise AttemptAlreadySubmitted()

            attempt.answers = answers or {}
            attempt.completed_at = timezone.now()
            if exam.is_mcq:
                attempt.score = score_answers(exam.questions.all(), attempt.answers)
            attempt.save(update_fields=['answers', 'completed_at', 'score'])
            log_activity(attempt.user, ActivityLog.EXAM_COMPLETE, exam.id, 'exam')

        if attempt.is_late:
            logger.warning("Attempt %s for exam %s was submitted after its deadline", attempt.id, exam.id)
        logger.info("Attempt %s submitted (score=%s)", attempt.id, attempt.score)
        return attempt

    @staticmethod
    def grade_attempt(attempt, feedback):
        """Record an admin review of a submitted attempt."""
        if not attempt.is_completed:
            raise AttemptNotSubmitted()
        attempt.feedback = feedback
        attempt.reviewed_at = timezone.now()
        attempt.save(update_fields=['feedback', 'reviewed_at'])
        logger.info("Attempt %s reviewed", attempt.id)
        return attempt


class QuestionService:

    @staticmethod
    def next_order(exam):
        return exam.questions.count()

    @staticmethod
    def replace_questions(exam, questions):
        """
        Swap the full question set of an exam in one transaction.
        ``questions`` are validated dicts with text/order/options/correct_option.
        """
        with transaction.atomic():
            exam.questions.all().delete()
            created = Question.objects.bulk_create([
                Question(
                    exam=exam,
                    text=item['text'],
                    order=item['order'] if item.get('order') is not None else index,
                    options=item.get('options') or [],
                    correct_option=item.get('correct_option'),
                )
                for index, item in enumerate(questions)
            ])
        logger.info("Replaced questions of exam %s (%s questions)", exam.id, len(created))
        return list(exam.questions.all())
