"""项目内使用的自定义异常定义。"""

from pathlib import Path


class ImageDerivativesError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ImageDerivativesError):
    """配置不合法时抛出。"""


class SourceDirectoryMissing(ImageDerivativesError):
    """源目录不存在，整个任务无法开始。"""

    def __init__(self, path: Path) -> None:
        super().__init__(f"源目录不存在: {path}")
        self.path = path


class DirectoryProvisionError(ImageDerivativesError):
    """输出目录无法创建（例如路径被普通文件占用）。"""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"无法创建输出目录 {path}: {reason}")
        self.path = path
