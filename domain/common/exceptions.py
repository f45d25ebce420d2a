"""领域层业务异常定义，供领域、应用与基础设施使用。

gRPC 层只负责把异常映射为状态码（见 grpc_app/interceptors/exceptions.py），
领域层不反向依赖传输层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class InvalidCoordinateException(BusinessException):
    """Point/Rectangle 字段缺失或超出 E7 取值范围"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="InvalidCoordinate",
            details=details,
            field=field,
        )


class FeatureDataException(BusinessException):
    """特征数据文件无法读取或格式错误"""

    def __init__(self, source: str, reason: str):
        super().__init__(
            code=BusinessCode.DATA_LOAD_ERROR,
            message=f"Failed to load features from {source}: {reason}",
            error_type="FeatureDataError",
            details={"source": source},
        )


class FeatureStoreStateException(BusinessException):
    """特征库在加载前被查询，或被重复加载"""

    def __init__(self, message: str):
        super().__init__(
            code=BusinessCode.SYSTEM_ERROR,
            message=message,
            error_type="FeatureStoreState",
        )


__all__ = [
    "BusinessException",
    "InvalidCoordinateException",
    "FeatureDataException",
    "FeatureStoreStateException",
]
