# finance_api/api/categories.py
from fastapi import APIRouter, Depends, status
from typing import List
from finance_api.schemas.category import CategoryIn, CategoryOut
from finance_api.api.deps import get_category_service
from finance_api.services.categories import CategoryService

router = APIRouter(tags=["categorias"])

@router.get("", response_model=List[CategoryOut])
def list_categories(service: CategoryService = Depends(get_category_service)):
    return service.list()

@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    return service.get(category_id)

@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryIn, service: CategoryService = Depends(get_category_service)):
    return service.create(payload)

@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryIn, service: CategoryService = Depends(get_category_service)):
    return service.update(category_id, payload)

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    service.delete(category_id)
    return None
