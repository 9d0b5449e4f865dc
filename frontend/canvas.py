"""
画布交互层 - 虚拟坐标映射、点击命中检测和逐点绘制状态机

所有存储和比较的点都位于固定的虚拟坐标空间 (BASE_WIDTH x BASE_HEIGHT)，
实际渲染尺寸可以不同，命中检测在渲染像素空间进行。
"""
import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Segment = Tuple[Point, Point]

BASE_WIDTH = 800
BASE_HEIGHT = 600

POINT_RADIUS = 6
POINT_HOVER_RADIUS = 10
POINT_CLICK_THRESHOLD = 16
LINE_WIDTH = 2

COLORS = ('#ef4444', '#10b981', '#f59e0b', '#8b5cf6', '#ec4899')

MIN_POLYGON_POINTS = 3


def polygon_color(index: int) -> str:
    """按序号循环取多边形颜色"""
    return COLORS[index % len(COLORS)]


class CanvasGeometry:
    """渲染画布的尺寸和屏幕原点，负责虚拟坐标与像素坐标的相互转换"""

    def __init__(self, width: float, height: float, left: float = 0.0, top: float = 0.0,
                 threshold: float = POINT_CLICK_THRESHOLD):
        self.threshold = threshold
        self.resize(width, height, left, top)

    def resize(self, width: float, height: float, left: Optional[float] = None, top: Optional[float] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"画布尺寸必须为正数: {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        if left is not None:
            self.left = float(left)
        if top is not None:
            self.top = float(top)

    def to_virtual(self, client_x: float, client_y: float) -> Point:
        """指针事件的屏幕坐标 -> 虚拟坐标"""
        scale_x = BASE_WIDTH / self.width
        scale_y = BASE_HEIGHT / self.height
        return ((client_x - self.left) * scale_x, (client_y - self.top) * scale_y)

    def to_actual(self, point: Sequence[float]) -> Point:
        """虚拟坐标 -> 渲染像素坐标"""
        scale_x = self.width / BASE_WIDTH
        scale_y = self.height / BASE_HEIGHT
        return (point[0] * scale_x, point[1] * scale_y)

    def is_point_near(self, point: Sequence[float], target: Sequence[float]) -> bool:
        actual_x, actual_y = self.to_actual(point)
        target_x, target_y = self.to_actual(target)
        return float(np.hypot(actual_x - target_x, actual_y - target_y)) <= self.threshold

    def find_point_index(self, point: Sequence[float], points: Sequence[Sequence[float]]) -> int:
        """返回第一个落在阈值内的已有点序号，没有则返回 -1"""
        if len(points) == 0:
            return -1
        scale = np.array([self.width / BASE_WIDTH, self.height / BASE_HEIGHT])
        actual = np.asarray(points, dtype=float) * scale
        click = np.asarray(point, dtype=float) * scale
        distances = np.hypot(actual[:, 0] - click[0], actual[:, 1] - click[1])
        hits = np.flatnonzero(distances <= self.threshold)
        return int(hits[0]) if hits.size else -1


class DrawingState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    CLOSABLE = "closable"


class ClickOutcome(str, Enum):
    IGNORED = "ignored"
    ADDED = "added"
    ON_EXISTING = "on_existing"
    CLOSED = "closed"


class DrawingSession:
    """
    单个正在绘制的多边形

    IDLE -> start() -> DRAWING (0-2 个点) -> CLOSABLE (>=3 个点)
    CLOSABLE 状态下点击首点附近即闭合，回到 IDLE 并通过 on_close 交出点序列；
    cancel() 在任何状态下都回到 IDLE 并丢弃已有点。
    """

    def __init__(self, geometry: CanvasGeometry, on_close: Optional[Callable[[List[Point]], None]] = None):
        self.geometry = geometry
        self.on_close = on_close
        self.points: List[Point] = []
        self.is_drawing = False
        self.hovered_index = -1
        self.last_finished: Optional[List[Point]] = None

    @property
    def state(self) -> DrawingState:
        if not self.is_drawing:
            return DrawingState.IDLE
        if len(self.points) >= MIN_POLYGON_POINTS:
            return DrawingState.CLOSABLE
        return DrawingState.DRAWING

    @property
    def can_close(self) -> bool:
        return self.state is DrawingState.CLOSABLE

    @property
    def point_count(self) -> int:
        return len(self.points)

    def start(self):
        self.is_drawing = True
        self.points = []
        self.hovered_index = -1

    def cancel(self):
        if self.is_drawing:
            logger.debug("取消绘制，丢弃 %d 个点", len(self.points))
        self.is_drawing = False
        self.points = []
        self.hovered_index = -1

    def click(self, client_x: float, client_y: float) -> ClickOutcome:
        if not self.is_drawing:
            return ClickOutcome.IGNORED

        point = self.geometry.to_virtual(client_x, client_y)

        # 闭合优先于加点
        if self.can_close and self.geometry.is_point_near(point, self.points[0]):
            self._finish()
            return ClickOutcome.CLOSED

        # 不支持拖动/编辑已有点，点在已有点上不重复添加
        if self.geometry.find_point_index(point, self.points) != -1:
            return ClickOutcome.ON_EXISTING

        self.points.append(point)
        return ClickOutcome.ADDED

    def hover(self, client_x: float, client_y: float) -> int:
        """更新悬停点序号，只有可闭合时首点才会被高亮"""
        self.hovered_index = -1
        if self.can_close:
            point = self.geometry.to_virtual(client_x, client_y)
            if self.geometry.is_point_near(point, self.points[0]):
                self.hovered_index = 0
        return self.hovered_index

    def preview_segments(self, client_x: float, client_y: float) -> List[Segment]:
        """末点到指针的预览线；悬停在首点上时再加一条指针到首点的闭合线（像素坐标）"""
        if not self.is_drawing or not self.points:
            return []
        mouse = self.geometry.to_actual(self.geometry.to_virtual(client_x, client_y))
        segments = [(self.geometry.to_actual(self.points[-1]), mouse)]
        if self.can_close and self.hovered_index == 0:
            segments.append((mouse, self.geometry.to_actual(self.points[0])))
        return segments

    def _finish(self) -> List[Point]:
        finished = list(self.points)
        self.points = []
        self.is_drawing = False
        self.hovered_index = -1
        self.last_finished = finished
        logger.debug("多边形闭合，共 %d 个点", len(finished))
        if self.on_close is not None:
            self.on_close(finished)
        return finished
