"""JSON API for the in-page question list.

The server keeps no list; the page posts its current questions and gets the
result back.
"""
from flask import Blueprint, jsonify, render_template, request

from app.services.presentation import TYPESET_DELAY_MS, build_list_view
from app.services.question_store import reorder_questions
from app.services.question_validation import validate_question

api_questions_bp = Blueprint('api_questions', __name__, url_prefix='/api/questions')


def bad_request(message, status=400):
    return jsonify({'error': message}), status


def _questions_from_body(data):
    """Parse the posted list; returns (questions, error message)."""
    items = data.get('questions')
    if not isinstance(items, list):
        return None, 'questions must be a list'
    questions = []
    for position, item in enumerate(items):
        question, reason = validate_question(item)
        if question is None:
            return None, f'question at position {position}: {reason}'
        questions.append(question)
    return questions, None


@api_questions_bp.post('/reorder')
def reorder():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return bad_request('JSON body required')

    questions, error = _questions_from_body(data)
    if error:
        return bad_request(error)

    try:
        reordered = reorder_questions(
            questions, data.get('oldIndex'), data.get('newIndex')
        )
    except IndexError as e:
        return bad_request(str(e))

    return jsonify({'questions': [q.to_dict() for q in reordered]})


@api_questions_bp.post('/render')
def render_list():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return bad_request('JSON body required')

    questions, error = _questions_from_body(data)
    if error:
        return bad_request(error)

    return render_template(
        'quiz/_question_list.html',
        questions=build_list_view(questions),
        typeset_delay_ms=TYPESET_DELAY_MS,
    )
