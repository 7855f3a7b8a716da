"""메인 페이지 Blueprint"""
from flask import Blueprint, render_template

from app import current_config
from app.services.presentation import TYPESET_DELAY_MS

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """업로드 + 문제 목록 페이지"""
    cfg = current_config()
    return render_template(
        'index.html',
        max_upload_mb=cfg.runtime.max_upload_mb,
        typeset_delay_ms=TYPESET_DELAY_MS,
    )


@main_bp.route('/healthz')
def healthz():
    cfg = current_config()
    return {'status': 'ok', 'vendor': cfg.runtime.ai_vendor}
