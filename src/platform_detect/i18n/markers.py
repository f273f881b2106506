"""
预发布标记 - 字符集本地化

本模块提供预发布版本（alpha / beta）在版本号中的显示符号。
包括：
1. unicode 字符集 - 使用希腊字母 α / β
2. ascii 字符集 - 使用 a / b（Java 等无法可靠输出非 ASCII 字符的宿主）

用途：
- 版本号后缀 - 例如 ``12.0b2`` 会被规范为 ``12.0β2``
"""

PRERELEASE_MARKERS = {
    'unicode': {'alpha': 'α', 'beta': 'β'},
    'ascii': {'alpha': 'a', 'beta': 'b'},
}

CHARSETS = tuple(PRERELEASE_MARKERS)


def prerelease_marker(stage: str, charset: str = 'unicode') -> str:
    """
    返回预发布阶段对应的显示符号

    参数:
        stage: 预发布阶段，'alpha' 或 'beta'
        charset: 字符集，'unicode' 或 'ascii'；未知字符集按 unicode 处理

    返回:
        str: 显示符号，例如 'β'
    """
    markers = PRERELEASE_MARKERS.get(charset, PRERELEASE_MARKERS['unicode'])
    return markers[stage]
