from pathlib import Path
import sys

# ensure src is importable
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT / 'src') not in sys.path:
    sys.path.insert(0, str(ROOT / 'src'))

import pytest

from platform_detect.config import DEFAULT_PATTERNS_PATH
from platform_detect.errors import PatternTableError
from platform_detect.matching.matcher import entry_matches
from platform_detect.matching.tables import (
    AXES,
    build_tables,
    find_shadowed_entries,
    load_tables,
)


def _doc(*rows, **extra):
    doc = {'version': 1, 'entries': list(rows)}
    doc.update(extra)
    return doc


def test_load_default_tables():
    tables = load_tables(DEFAULT_PATTERNS_PATH)
    assert tables.version == 3
    counts = {axis: len(tables.axis(axis)) for axis in AXES}
    assert counts == {'layout': 9, 'name': 51, 'product': 434, 'manufacturer': 405, 'os': 31}
    assert len(tables.vendors) == 21
    assert tables.vendors[0] == ('Apple', ('iPad', 'iPhone', 'iPod'))
    assert tables.windows_versions['6.1'] == 'Server 2008 R2 / 7'


def test_load_tables_is_cached():
    assert load_tables(DEFAULT_PATTERNS_PATH) is load_tables(DEFAULT_PATTERNS_PATH)


def test_entries_keep_declared_order():
    tables = load_tables(DEFAULT_PATTERNS_PATH)
    layout = [entry.label for entry in tables.layout]
    assert layout[:3] == ['EdgeHTML', 'Trident', 'WebKit']
    assert [entry.ordinal for entry in tables.layout] == list(range(len(layout)))


def test_auto_pattern_is_qualified_label():
    tables = build_tables(_doc({'id': 'p.kf', 'axis': 'product', 'label': 'Kindle Fire'}))
    entry = tables.product.get('p.kf')
    assert entry.pattern == 'Kindle ?Fire'
    assert not entry.explicit
    assert entry.sample == 'Kindle Fire'


def test_explicit_pattern_sample_uses_first_alternative():
    tables = build_tables(_doc(
        {'id': 'n.edge', 'axis': 'name', 'label': 'Microsoft Edge', 'pattern': '(?:Edge|Edg|EdgA)'},
        {'id': 'p.g8', 'axis': 'product', 'label': 'Motorola G 8', 'pattern': r'moto g\(8\)'},
    ))
    assert tables.name.get('n.edge').sample == 'Edge'
    assert tables.product.get('p.g8').sample == 'moto g(8)'


def test_tables_axis_rejects_unknown():
    tables = build_tables(_doc())
    with pytest.raises(KeyError):
        tables.axis('browser')


@pytest.mark.parametrize('document', [
    None,
    [],
    {'entries': 'nope'},
    _doc({'id': 'x', 'axis': 'browser', 'label': 'X'}),
    _doc({'id': 'x', 'axis': 'name'}),
    _doc({'id': 'x', 'axis': 'name', 'label': 'X'}, {'id': 'x', 'axis': 'os', 'label': 'Y'}),
    _doc({'id': 'x', 'axis': 'name', 'label': 'X', 'pattern': '(unclosed'}),
    _doc(vendors=[{'products': ['a']}]),
    _doc(windows_versions=['10.0']),
    _doc(version='three'),
])
def test_build_tables_rejects_malformed_documents(document):
    with pytest.raises(PatternTableError):
        build_tables(document, 'test.yaml')


def test_pattern_table_error_is_value_error():
    with pytest.raises(ValueError):
        build_tables({'entries': None})


def test_load_tables_missing_file(tmp_path):
    with pytest.raises(PatternTableError):
        load_tables(tmp_path / 'missing.yaml')


def test_load_tables_invalid_yaml(tmp_path):
    path = tmp_path / 'broken.yaml'
    path.write_text('entries: [unclosed\n', encoding='utf-8')
    with pytest.raises(PatternTableError):
        load_tables(path)


def test_load_tables_from_custom_file(tmp_path):
    path = tmp_path / 'small.yaml'
    path.write_text(
        'version: 7\n'
        'entries:\n'
        "  - {id: name.a, axis: name, label: 'Alpha'}\n"
        "  - {id: os.b, axis: os, label: 'BetaOS'}\n",
        encoding='utf-8',
    )
    tables = load_tables(path)
    assert tables.version == 7
    assert [e.label for e in tables.name] == ['Alpha']
    assert len(tables.product) == 0
    assert tables.vendors == ()


def test_find_shadowed_entries():
    tables = build_tables(_doc(
        {'id': 'a', 'axis': 'name', 'label': 'Opera'},
        {'id': 'b', 'axis': 'name', 'label': 'Opera', 'pattern': 'OPR'},
        {'id': 'c', 'axis': 'name', 'label': 'Opera Mini'},
    ))
    shadowed = find_shadowed_entries(tables.name, entry_matches)
    assert [(entry.id, earlier.id) for entry, earlier in shadowed] == [('c', 'a')]


def test_find_shadowed_entries_ignores_same_label():
    tables = build_tables(_doc(
        {'id': 'a', 'axis': 'name', 'label': 'IE', 'pattern': 'MSIE'},
        {'id': 'b', 'axis': 'name', 'label': 'IE', 'pattern': 'MSIE 10'},
    ))
    assert find_shadowed_entries(tables.name, entry_matches) == []
