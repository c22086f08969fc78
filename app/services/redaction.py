"""Projections over the question bank used on the quiz write and read paths."""

from app.schemas.quiz import PublicOption, PublicQuestion, PublicQuiz, QuizDefinition


def recompute_total_points(quiz: QuizDefinition) -> QuizDefinition:
    """Return a copy of ``quiz`` whose total matches its questions' points.

    Called explicitly by every path that writes a question bank.
    """
    total = sum(question.points for question in quiz.questions)
    return quiz.model_copy(update={"total_points": total})


def public_view(quiz: QuizDefinition) -> PublicQuiz:
    """Project a quiz onto what a participant may see before answering.

    Answer keys, option correctness flags, explanations and the secret code
    are all dropped. The result is a separate model, so nothing added to
    `QuizDefinition` later leaks here by accident.
    """
    questions = [
        PublicQuestion(
            id=question.id,
            kind=question.kind,
            question=question.question,
            question_latex=question.question_latex,
            options=[
                PublicOption(id=option.id, text=option.text, latex=option.latex)
                for option in question.options
            ],
            points=question.points,
            time_limit=question.time_limit,
        )
        for question in quiz.questions
    ]
    return PublicQuiz(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        created_by=quiz.created_by,
        is_public=quiz.is_public,
        questions=questions,
        settings=quiz.settings,
        total_points=quiz.total_points,
        created_at=quiz.created_at,
    )
