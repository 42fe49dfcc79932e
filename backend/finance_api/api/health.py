from fastapi import APIRouter
from finance_api.schemas.simple import Health

router = APIRouter()

@router.get('/', response_model=Health)
def health():
    return {'status': 'API is running'}
