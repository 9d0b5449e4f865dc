"""
多边形 REST 接口客户端
"""
import os
from typing import Any, Dict, List, Optional, Sequence

import requests

API_URL = os.getenv("POLYGON_API_URL", "http://localhost:3000/api")


class ApiError(Exception):
    """接口调用失败；status_code 为 None 表示请求没有到达服务端"""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class PolygonApi:

    def __init__(self, base_url: str = API_URL, session=None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(None, f"网络错误: {e}") from e

        if r.status_code >= 400:
            try:
                data = r.json()
            except ValueError:
                data = None
            detail = data.get("detail") if isinstance(data, dict) else None
            if isinstance(detail, list):
                # 校验错误是 pydantic 的错误列表
                detail = "参数校验失败: " + "; ".join(str(e.get("msg", e) if isinstance(e, dict) else e) for e in detail)
            elif not isinstance(detail, str):
                detail = f"HTTP {r.status_code}"
            raise ApiError(r.status_code, detail)

        # DELETE 返回 204，没有响应体
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def get_all(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/polygons")

    def get(self, polygon_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/polygons/{polygon_id}")

    def create(self, name: str, points: Sequence[Sequence[float]]) -> Dict[str, Any]:
        payload = {"name": name, "points": [list(p) for p in points]}
        return self._request("POST", "/polygons", json=payload)

    def delete(self, polygon_id: str) -> None:
        self._request("DELETE", f"/polygons/{polygon_id}")
