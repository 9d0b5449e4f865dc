from fastapi import APIRouter, HTTPException, Response, status
from typing import List

from schemas import Polygon, PolygonCreate
from store import store

router = APIRouter()


@router.post("", response_model=Polygon, status_code=status.HTTP_201_CREATED)
async def create_polygon(payload: PolygonCreate):
    return store.create(payload.name, payload.points)


@router.get("", response_model=List[Polygon])
async def list_polygons():
    """按创建时间倒序返回所有多边形"""
    return store.list()


@router.get("/{polygon_id}", response_model=Polygon)
async def get_polygon(polygon_id: str):
    polygon = store.get(polygon_id)
    if polygon is None:
        raise HTTPException(status_code=404, detail=f"多边形 {polygon_id} 不存在")
    return polygon


@router.delete("/{polygon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_polygon(polygon_id: str):
    if not store.delete(polygon_id):
        raise HTTPException(status_code=404, detail=f"多边形 {polygon_id} 不存在")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
