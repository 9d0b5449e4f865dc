"""
多边形列表状态 - 加载、创建、带确认的删除

接口失败不会抛出，而是写入 error 并返回 None；成功/失败提示以日志形式输出。
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .api import ApiError, PolygonApi
from .canvas import MIN_POLYGON_POINTS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PolygonList:

    def __init__(self, api: Optional[PolygonApi] = None):
        self.api = api if api is not None else PolygonApi()
        self.polygons: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.pending_delete: Optional[Dict[str, Any]] = None

    @property
    def count(self) -> int:
        return len(self.polygons)

    @property
    def has_polygons(self) -> bool:
        return self.count > 0

    def _with_error_handling(self, fn: Callable[[], T]) -> Optional[T]:
        self.loading = True
        self.error = None
        try:
            return fn()
        except ApiError as e:
            self.error = e.message
            logger.warning("操作失败: %s", e.message)
            return None
        finally:
            self.loading = False

    def load(self) -> Optional[List[Dict[str, Any]]]:
        def _load():
            self.polygons = self.api.get_all()
            return self.polygons
        return self._with_error_handling(_load)

    def create(self, name: str, points: Sequence[Sequence[float]]) -> Optional[Dict[str, Any]]:
        name = (name or "").strip()
        if not name:
            self.error = "请输入多边形名称"
            return None
        if len(points) < MIN_POLYGON_POINTS:
            self.error = f"多边形至少需要 {MIN_POLYGON_POINTS} 个点"
            return None

        def _create():
            polygon = self.api.create(name, points)
            # 与服务端一致，最新的排在最前
            self.polygons.insert(0, polygon)
            logger.info("多边形 %s 创建成功", polygon["name"])
            return polygon
        return self._with_error_handling(_create)

    def delete(self, polygon_id: str) -> Optional[bool]:
        def _delete():
            self.api.delete(polygon_id)
            self.polygons = [p for p in self.polygons if p["id"] != polygon_id]
            logger.info("多边形 %s 删除成功", polygon_id)
            return True
        return self._with_error_handling(_delete)

    def request_delete(self, polygon_id: str) -> Optional[Dict[str, Any]]:
        """标记待删除的多边形，等待用户确认"""
        self.pending_delete = next((p for p in self.polygons if p["id"] == polygon_id), None)
        return self.pending_delete

    def confirm_delete(self) -> Optional[bool]:
        if self.pending_delete is None:
            return None
        polygon_id = self.pending_delete["id"]
        self.pending_delete = None
        return self.delete(polygon_id)

    def cancel_delete(self):
        self.pending_delete = None
