"""Bundled message templates for English and Simplified Chinese.

Placeholders: path, component_type, prop_name, actual_value, component_id,
field, expected_kind, actual_kind, line, column, suggestions, expected_type.
"""

from src.diagnostics import DiagnosticCode

from .lib import Language, LocationLabels, MessageTemplate

_T = MessageTemplate

EN_MESSAGES: dict[DiagnosticCode, MessageTemplate] = {
    DiagnosticCode.UNKNOWN_COMPONENT: _T('Unknown component type "{{component_type}}"'),
    DiagnosticCode.MISSING_REQUIRED_PROP: _T('Missing required property "{{prop_name}}"'),
    DiagnosticCode.INVALID_PROP_TYPE: _T(
        'Property "{{prop_name}}" expects {{expected_kind}}, got {{actual_kind}}'
    ),
    DiagnosticCode.INVALID_ENUM_VALUE: _T(
        'Invalid value "{{actual_value}}" for property "{{prop_name}}"'
    ),
    DiagnosticCode.MISSING_ID: _T("Component is missing an id"),
    DiagnosticCode.MISSING_VERSION: _T("Schema is missing a version"),
    DiagnosticCode.DEPRECATED_COMPONENT: _T('Component "{{component_type}}" is deprecated'),
    DiagnosticCode.DUPLICATE_ID: _T('Duplicate component id "{{component_id}}"'),
    DiagnosticCode.CASE_MISMATCH: _T(
        'Component type "{{component_type}}" has incorrect casing',
        'Use "{{expected_type}}"',
    ),
    DiagnosticCode.INVALID_JSON: _T(
        "Invalid JSON at line {{line}}, column {{column}}",
        "Check for missing brackets, quotes, or commas",
    ),
    DiagnosticCode.INVALID_TYPE: _T('Field "{{field}}" has the wrong type'),
    DiagnosticCode.INVALID_VALUE: _T('Field "{{field}}" cannot be empty'),
    DiagnosticCode.MISSING_FIELD: _T('Missing required field "{{field}}"'),
    DiagnosticCode.INVALID_STRUCTURE: _T("Invalid document structure"),
}

ZH_MESSAGES: dict[DiagnosticCode, MessageTemplate] = {
    DiagnosticCode.UNKNOWN_COMPONENT: _T(
        '未知的组件类型 "{{component_type}}"',
        "您是否想使用：{{suggestions}}？",
    ),
    DiagnosticCode.MISSING_REQUIRED_PROP: _T(
        '缺少必需属性 "{{prop_name}}"',
        '请添加 "{{prop_name}}" 属性',
    ),
    DiagnosticCode.INVALID_PROP_TYPE: _T(
        '属性 "{{prop_name}}" 应为 {{expected_kind}} 类型，实际为 {{actual_kind}}',
        '请将 "{{prop_name}}" 改为 {{expected_kind}} 类型',
    ),
    DiagnosticCode.INVALID_ENUM_VALUE: _T(
        '属性 "{{prop_name}}" 的值 "{{actual_value}}" 无效',
        "您是否想使用：{{suggestions}}？",
    ),
    DiagnosticCode.MISSING_ID: _T("组件缺少 id", "请为组件添加唯一的字符串 id"),
    DiagnosticCode.MISSING_VERSION: _T("Schema 缺少 version 字段", '请添加 "version" 字段'),
    DiagnosticCode.DEPRECATED_COMPONENT: _T(
        '组件 "{{component_type}}" 已弃用',
        "请考虑使用替代组件",
    ),
    DiagnosticCode.DUPLICATE_ID: _T(
        '组件 id "{{component_id}}" 重复',
        "组件 id 在文档中必须唯一",
    ),
    DiagnosticCode.CASE_MISMATCH: _T(
        '组件类型 "{{component_type}}" 大小写不正确',
        '请使用 "{{expected_type}}"',
    ),
    DiagnosticCode.INVALID_JSON: _T(
        "JSON 格式错误，位于第 {{line}} 行第 {{column}} 列",
        "请检查是否缺少括号、引号或逗号",
    ),
    DiagnosticCode.INVALID_TYPE: _T('字段 "{{field}}" 类型错误'),
    DiagnosticCode.INVALID_VALUE: _T('字段 "{{field}}" 不能为空'),
    DiagnosticCode.MISSING_FIELD: _T('缺少必需字段 "{{field}}"'),
    DiagnosticCode.INVALID_STRUCTURE: _T(
        "文档结构无效",
        "请检查组件嵌套是否过深或存在循环引用",
    ),
}

DEFAULT_MESSAGES: dict[Language, dict[DiagnosticCode, MessageTemplate]] = {
    Language.EN: EN_MESSAGES,
    Language.ZH: ZH_MESSAGES,
}

DEFAULT_LABELS: dict[Language, LocationLabels] = {
    Language.EN: LocationLabels(path="Path: {path}", position="Line {line}, Column {column}"),
    Language.ZH: LocationLabels(path="路径: {path}", position="第 {line} 行, 第 {column} 列"),
}
