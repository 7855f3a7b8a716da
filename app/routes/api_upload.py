"""Document upload API Blueprint"""
from flask import Blueprint, request, jsonify, current_app

from app import current_config
from app.domain.errors import MalformedModelOutput, QuizImportError
from app.services.documents import read_upload
from app.services.upload_service import extract_questions

api_upload_bp = Blueprint('api_upload', __name__, url_prefix='/api')

# Older pages posted under "pdf" or "docx"; new ones use "file".
UPLOAD_FIELDS = ('file', 'pdf', 'docx')


def _uploaded_file():
    for field in UPLOAD_FIELDS:
        file = request.files.get(field)
        if file is not None and file.filename:
            return file
    return None


@api_upload_bp.route('/upload', methods=['POST'])
def upload_document():
    """PDF/DOCX 업로드 -> AI 추출 -> 문제 목록"""
    cfg = current_config()
    # Parsing the form may raise RequestEntityTooLarge; the app-level handler answers it.
    file = _uploaded_file()

    try:
        document = read_upload(file, cfg.runtime.max_upload_bytes)
        current_app.logger.info(
            "Upload accepted: %s (%s, %d bytes)",
            document.filename,
            document.kind,
            document.size,
        )
        result = extract_questions(document, cfg)
    except MalformedModelOutput as e:
        current_app.logger.warning("Unparseable AI response: %s", e.message)
        return jsonify(e.to_dict()), e.status_code
    except QuizImportError as e:
        current_app.logger.warning("Upload failed (%s): %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.exception('Upload processing failed')
        return jsonify({'error': 'Failed to process document', 'details': str(e)}), 500

    return jsonify(result.to_dict())
