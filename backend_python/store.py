"""
数据存储模块 - 多边形记录的SQLite持久化
"""
import json
import sqlite3
import os
import uuid
from typing import List, Dict, Any, Optional, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone

from utils.logger import log_polygon_operation

# 数据库文件路径
DB_PATH = os.getenv("POLYGON_DB_PATH", "polygons.db")


@contextmanager
def get_db_connection(db_path: str = DB_PATH):
    """获取数据库连接的上下文管理器"""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_database(db_path: str = DB_PATH):
    """初始化数据库表"""
    with get_db_connection(db_path) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS polygons (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                points TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        conn.commit()


def _utc_timestamp() -> str:
    # 毫秒精度 + Z 后缀，保证字符串排序与时间顺序一致
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _row_to_polygon(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        'id': row['id'],
        'name': row['name'],
        'points': json.loads(row['points']),
        'createdAt': row['created_at'],
        'updatedAt': row['updated_at'],
    }


class PolygonStore:
    """多边形存储类 - 单表，无更新操作"""

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        init_database(db_path)

    def create(self, name: str, points: Sequence[Sequence[float]]) -> Dict[str, Any]:
        """新建多边形，生成id和时间戳后写入数据库"""
        now = _utc_timestamp()
        polygon = {
            'id': str(uuid.uuid4()),
            'name': name,
            'points': [[float(x), float(y)] for x, y in points],
            'createdAt': now,
            'updatedAt': now,
        }
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                "INSERT INTO polygons (id, name, points, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (
                    polygon['id'],
                    polygon['name'],
                    json.dumps(polygon['points']),
                    polygon['createdAt'],
                    polygon['updatedAt'],
                )
            )
            conn.commit()

        log_polygon_operation("创建", {"id": polygon['id'], "points": len(polygon['points'])})
        return polygon

    def list(self) -> List[Dict[str, Any]]:
        """按创建时间倒序返回全部多边形"""
        with get_db_connection(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT * FROM polygons ORDER BY created_at DESC, rowid DESC"
            )
            return [_row_to_polygon(row) for row in cursor.fetchall()]

    def get(self, polygon_id: str) -> Optional[Dict[str, Any]]:
        with get_db_connection(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT * FROM polygons WHERE id = ?",
                (polygon_id,)
            )
            row = cursor.fetchone()
            return _row_to_polygon(row) if row else None

    def delete(self, polygon_id: str) -> bool:
        """删除多边形，返回是否真的删除了记录"""
        with get_db_connection(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM polygons WHERE id = ?",
                (polygon_id,)
            )
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            log_polygon_operation("删除", {"id": polygon_id})
        return deleted

    def count(self) -> int:
        with get_db_connection(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM polygons").fetchone()[0]

    def clear(self):
        """清空全部多边形"""
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM polygons")
            conn.commit()
        log_polygon_operation("清空")


# 默认存储实例
store = PolygonStore()
