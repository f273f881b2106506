"""
解析管道 - 从用户代理字符串到平台记录的完整流程

本模块按固定顺序执行整个识别流程：
1. 表匹配 - 依次匹配渲染引擎、浏览器名称、设备型号、厂商、操作系统
2. 规则修正 - 按顺序执行各条修正规则（每条规则只读取前面规则的结果）
3. 宿主信息 - 调用方提供 HostHints 时，融合运行时信息
4. 架构识别 - 拆分操作系统名称与版本，识别 64 位系统
5. 描述生成 - 组合出可读的描述字符串

支持的功能：
- 嵌套解析（Opera 伪装、IE Mobile 11 等情况），深度最多一层
- 自定义模式表路径（通过配置或环境变量）

作者: platform-detect
"""

import logging
import re
from typing import Optional, Union

from platform_detect.config import get_settings
from platform_detect.hints import EMPTY_HINTS, HostHints, probe
from platform_detect.matching.matcher import match_label, match_manufacturer, match_os, match_product
from platform_detect.matching.tables import PatternTables, load_tables
from platform_detect.pipeline import architecture, corrections, engines, host
from platform_detect.pipeline.describe import compose_description
from platform_detect.pipeline.snapshot import Snapshot
from platform_detect.record import NULL_OS, PlatformRecord

logger = logging.getLogger(__name__)

MAX_NESTED_DEPTH = 1

# 修正规则的执行顺序（顺序本身就是语义的一部分）
RULES = (
    corrections.extract_android_product,
    corrections.refine_product,
    corrections.correct_identity,
    corrections.resolve_missing_version,
    corrections.correct_layout,
    corrections.correct_desktop_ie,
    host.apply_host_hints,
    corrections.tag_prerelease,
    corrections.correct_mobile_and_masking,
    engines.apply_webkit_ladder,
    corrections.correct_desktop_modes,
    corrections.strip_os_noise,
    corrections.note_layout,
    architecture.resolve_os,
    architecture.detect_architecture,
)


def _usable_hints(hints: HostHints) -> HostHints:
    """丢弃类名不符的宿主对象（例如不是 Opera 的 embedded_engine）"""
    changes = {}
    engine = hints.embedded_engine
    if engine is not None and not re.search(r'\bOpera', engine.class_name):
        changes['embedded_engine'] = None
    runtime = hints.managed_runtime
    if runtime is not None and not re.search(r'\bJava', runtime.class_name):
        changes['managed_runtime'] = None
    return hints.model_copy(update=changes) if changes else hints


def _charset(hints: HostHints) -> str:
    if hints.charset:
        return hints.charset
    if hints.managed_runtime is not None:
        return 'ascii'
    return get_settings().marker_charset


def match_axes(s: Snapshot, tables: PatternTables) -> Snapshot:
    """
    对五个维度执行首个匹配优先的表扫描

    参数:
        s: 初始快照（只包含待解析字符串与宿主信息）
        tables: 已加载的模式表

    返回:
        Snapshot: 填入 layout、name、product、manufacturer、os 的新快照
    """
    ua = s.ua
    product = match_product(tables.product, ua)
    return s.with_(
        layout=match_label(tables.layout, ua),
        name=match_label(tables.name, ua),
        product=product,
        manufacturer=match_manufacturer(tables, product, ua),
        os=match_os(tables.os, ua, tables.windows_versions),
    )


def run_rules(s: Snapshot, tables: PatternTables) -> Snapshot:
    ctx = corrections.RuleContext(tables=tables, reparse=_reparse(tables))
    for rule in RULES:
        s = rule(s, ctx)
    return s


def _reparse(tables: PatternTables):
    def reparse(ua: str, parent: Snapshot) -> Optional[PlatformRecord]:
        if parent.depth >= MAX_NESTED_DEPTH:
            logger.debug('nested parse skipped at depth %s', parent.depth)
            return None
        logger.debug('nested parse of %r', ua)
        return resolve(ua, None, depth=parent.depth + 1, tables=tables)
    return reparse


def build_record(s: Snapshot, raw_ua: Optional[str]) -> PlatformRecord:
    version = s.version if s.name else None
    return PlatformRecord(
        description=compose_description(s, version),
        layout=s.layout,
        manufacturer=s.manufacturer,
        name=s.name,
        prerelease=s.prerelease,
        product=s.product,
        ua=raw_ua,
        version=version,
        os=s.os_info or NULL_OS,
    )


def resolve(ua: Optional[str], hints: Optional[HostHints], depth: int = 0,
            tables: Optional[PatternTables] = None) -> PlatformRecord:
    """
    解析一个用户代理字符串

    参数:
        ua: 待解析的字符串；为空时使用 hints 中 navigator 的 user_agent
        hints: 宿主信息（可选）；只有当 ua 与 navigator.user_agent 一致时才会使用
        depth: 嵌套深度（外部调用保持 0）
        tables: 模式表（None 表示使用配置中的默认表）

    返回:
        PlatformRecord: 不可变的识别结果
    """
    tables = tables or load_tables()
    hints = _usable_hints(hints) if hints is not None else None
    host_ua = hints.user_agent if hints is not None else ''
    subject = ua or host_ua
    use_features = hints is not None and subject == host_ua

    effective_hints = hints if use_features else EMPTY_HINTS
    version = None
    if use_features and effective_hints.embedded_engine is not None:
        version = probe(effective_hints.embedded_engine.version, what='opera.version')
        version = str(version) if version else None

    s = Snapshot(
        ua=subject,
        hints=effective_hints,
        use_features=use_features,
        depth=depth,
        charset=_charset(effective_hints),
        version=version,
        arch=subject,
    )
    s = run_rules(match_axes(s, tables), tables)
    return build_record(s, subject or None)


def parse(ua: Union[str, HostHints, None] = None, hints: Optional[HostHints] = None) -> PlatformRecord:
    """Detect the platform described by ``ua`` (and optionally ``hints``).

    ``ua`` may itself be a ``HostHints``; the subject string is then the
    navigator's user agent. Never raises for any input string.
    """
    if isinstance(ua, HostHints):
        ua, hints = None, ua
    elif ua is not None and not isinstance(ua, str):
        ua = str(ua)
    return resolve(ua, hints)
