"""
模式表审计 - 检查模式表中被前面条目遮蔽的行

对每个维度，取每一行的示例字符串，查看是否有更靠前的行先匹配并返回不同的标签。
这类行在实际解析中永远不会生效（通常是设备代码冲突或顺序错误）。

示例：
    python scripts/audit_patterns.py
    python scripts/audit_patterns.py --patterns custom.yaml --axis product
"""
import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / 'src') not in sys.path:
    sys.path.insert(0, str(ROOT / 'src'))

from platform_detect.matching.matcher import shadowed_in
from platform_detect.matching.tables import AXES, load_tables


def audit(patterns=None, axes=AXES):
    tables = load_tables(patterns)
    print('pattern table version', tables.version)
    total = 0
    for axis in axes:
        table = tables.axis(axis)
        shadowed = shadowed_in(table)
        total += len(shadowed)
        print(f'{axis}: {len(table)} rows, {len(shadowed)} shadowed')
        for entry, earlier in shadowed:
            print(f'  {entry.id} ({entry.label!r}) <- {earlier.id} ({earlier.label!r})')
    return total


def main():
    parser = argparse.ArgumentParser(description='Report pattern rows shadowed by earlier rows')
    parser.add_argument('--patterns', type=Path, default=None,
                        help='Pattern file (default: configured asset)')
    parser.add_argument('--axis', choices=AXES, action='append', dest='axes',
                        help='Axis to audit; repeatable (default: all)')
    args = parser.parse_args()

    audit(args.patterns, tuple(args.axes or AXES))


if __name__ == '__main__':
    main()
