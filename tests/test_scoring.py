from datetime import date

from app.services.scoring import score_candidate, select_today_exam


def _questions(correct_answers, orders=None):
    orders = orders or range(1, len(correct_answers) + 1)
    return [{"order": order, "correctAnswer": correct} for order, correct in zip(orders, correct_answers)]


def test_mixed_correct_wrong_and_skipped():
    questions = _questions([1, 0, 2])
    answers = [
        {"order": 1, "answer": 1, "skipped": False},
        {"order": 2, "answer": 2, "skipped": False},
        {"order": 3, "answer": None, "skipped": True},
    ]

    score = score_candidate(questions, answers)

    assert (score.total, score.correct, score.skipped, score.wrong) == (3, 1, 1, 1)


def test_no_answers_counts_every_question_as_skipped():
    score = score_candidate(_questions([0, 1, 2, 3, 0]), [])

    assert (score.total, score.correct, score.skipped, score.wrong) == (5, 0, 5, 0)


def test_answers_for_deleted_questions_are_ignored():
    questions = _questions([2, 3], orders=[1, 3])
    answers = [
        {"order": 1, "answer": 2, "skipped": False},
        {"order": 2, "answer": 0, "skipped": False},
        {"order": 3, "answer": 1, "skipped": False},
        {"order": 9, "answer": 1, "skipped": False},
    ]

    score = score_candidate(questions, answers)

    assert (score.total, score.correct, score.skipped, score.wrong) == (2, 1, 0, 1)


def test_first_option_is_a_real_answer():
    score = score_candidate(_questions([0]), [{"order": 1, "answer": 0, "skipped": False}])

    assert score.correct == 1
    assert score.skipped == 0


def test_skip_flag_wins_over_a_stored_value():
    score = score_candidate(_questions([1]), [{"order": 1, "answer": 1, "skipped": True}])

    assert score.correct == 0
    assert score.skipped == 1


def test_counts_always_add_up_to_question_count():
    questions = _questions([0, 1, 2, 3, 0, 1, 2, 3])
    for answered in range(len(questions) + 1):
        answers = [{"order": o, "answer": (o * 7) % 4, "skipped": False} for o in range(1, answered + 1)]
        score = score_candidate(questions, answers)
        assert score.correct + score.skipped + score.wrong == len(questions)
        assert score.skipped == len(questions) - answered


def test_select_today_exam():
    exams = [
        {"id": "Physics", "date": "2026-10-18"},
        {"id": "Math101", "date": "2026-10-19"},
    ]

    assert select_today_exam(exams, date(2026, 10, 19))["id"] == "Math101"
    assert select_today_exam(exams, date(2026, 10, 20)) is None
