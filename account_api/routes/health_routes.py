import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=['health'])


@router.get('/')
def root():
    return {'status': 'Account API Running'}


@router.get('/health')
def health(request: Request):
    started_at = request.app.state.started_at
    return {
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'uptime': round(time.monotonic() - started_at, 3),
    }


@router.get('/api')
def api_index():
    return {'message': 'Account API is running'}
