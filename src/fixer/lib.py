"""Best-effort automatic repair of malformed UI descriptions.

The fixer builds a corrected document node by node and never aliases or
mutates its input. Every correction is logged as a FixChange with a
confidence level; anything it cannot correct is returned as an unfixable
Diagnostic instead of being dropped or guessed.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.catalog import ComponentCatalog
from src.config import EnvVar, get_environment
from src.diagnostics import (
    Confidence,
    Diagnostic,
    DiagnosticCode,
    FixChange,
    FixKind,
    FixResult,
    child_path,
    prop_path,
)
from src.similarity import Match, find_closest
from src.validation import kind_of

logger = logging.getLogger(__name__)

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


@dataclass
class FixerConfig:
    """Tunable repair policy.

    Attributes:
        default_version: Version written into documents without one.
        medium_threshold: Minimum similarity for a rewrite to be proposed.
        high_threshold: Similarity at or above which a rewrite is high confidence.
        id_suffix: Optional suffix appended to synthesized ids.
        default_root_type: Component type of a synthesized root.
        resolve_aliases: Rewrite alias types to their canonical name.
        max_depth: Deepest node nesting repaired.
    """

    default_version: str = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_DEFAULT_VERSION)
    )
    medium_threshold: float = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_SIMILARITY_MEDIUM)
    )
    high_threshold: float = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_SIMILARITY_HIGH)
    )
    id_suffix: str = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_ID_SUFFIX)
    )
    default_root_type: str = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_DEFAULT_ROOT_TYPE)
    )
    resolve_aliases: bool = True
    max_depth: int = field(
        default_factory=lambda: get_environment(EnvVar.UISCHEMA_MAX_DEPTH)
    )

    def __post_init__(self) -> None:
        if not 0.0 <= self.medium_threshold <= self.high_threshold <= 1.0:
            raise ValueError(
                "Similarity thresholds must satisfy 0 <= medium <= high <= 1, "
                f"got medium={self.medium_threshold}, high={self.high_threshold}"
            )
        if not self.default_version.strip():
            raise ValueError("default_version cannot be empty")

    def confidence_for(self, score: float) -> Confidence:
        """Map a similarity score to a confidence level."""
        if score >= self.high_threshold:
            return Confidence.HIGH
        if score >= self.medium_threshold:
            return Confidence.MEDIUM
        return Confidence.LOW


class SchemaFixer:
    """Repair common generation mistakes in UI descriptions.

    Rules are applied top-down: version, root, then for every node
    depth-first: type, id, props (enum values and defaults), children.

    Args:
        catalog: Catalog supplying valid types and property schemas.
        config: Repair policy. Defaults to values from the environment.

    Example:
        >>> fixer = SchemaFixer(build_default_catalog())
        >>> result = fixer.fix({"root": {"type": "Containr", "props": {}}})
        >>> result.fixed["root"]["type"]
        'Container'
        >>> [c.kind.value for c in result.changes]
        ['add_version', 'fix_type', 'add_id']
    """

    def __init__(self, catalog: ComponentCatalog, config: FixerConfig | None = None):
        self.catalog = catalog
        self.config = config or FixerConfig()

    def fix(self, raw: Any) -> FixResult:
        """Repair a UI description.

        Args:
            raw: Parsed description; any value is accepted.

        Returns:
            FixResult holding a new corrected document, the change log and
            the unfixable residue.
        """
        repair = _Repair(self)
        fixed = repair.document(raw)
        result = FixResult(fixed=fixed, changes=repair.changes, unfixable=repair.unfixable)

        logger.debug(
            f"Fixed document: {len(result.changes)} change(s), "
            f"{len(result.unfixable)} unfixable"
        )
        return result

    def can_fix(self, raw: Any) -> bool:
        """Check whether `fix` would record at least one change.

        Runs the same rules as `fix` without copying anything and stops at
        the first change, so the two can never disagree. The input is not
        mutated.
        """
        return _Repair(self, dry_run=True).has_changes(raw)

    def default_document(self) -> dict[str, Any]:
        """Smallest document the fixer falls back to."""
        return {"version": self.config.default_version, "root": self.default_root()}

    def default_root(self) -> dict[str, Any]:
        return {"id": "root", "type": self.config.default_root_type, "props": {}}


class _FirstChange(Exception):
    """Ends a dry run as soon as a change would be recorded."""


class _Repair:
    """State for a single repair pass.

    Owns the id counter so repeated calls are deterministic and independent.
    A dry run shares input values instead of cloning them and stops at the
    first change.
    """

    def __init__(self, fixer: SchemaFixer, *, dry_run: bool = False):
        self.fixer = fixer
        self.catalog = fixer.catalog
        self.config = fixer.config
        self.dry_run = dry_run
        self.changes: list[FixChange] = []
        self.unfixable: list[Diagnostic] = []
        self.taken_ids: set[str] = set()
        self.assigned_ids: set[str] = set()
        self.ancestors: set[int] = set()
        self.counter = 0

    def has_changes(self, raw: Any) -> bool:
        try:
            self.document(raw)
        except _FirstChange:
            return True
        return bool(self.changes)

    def copy(self, value: Any) -> Any:
        return value if self.dry_run else _clone(value)

    def record(
        self,
        kind: FixKind,
        path: str,
        old_value: Any,
        new_value: Any,
        confidence: Confidence,
        description: str,
    ) -> None:
        if self.dry_run:
            raise _FirstChange
        change = FixChange(kind, path, old_value, new_value, confidence, description)
        self.changes.append(change)
        logger.debug(f"{kind.value} at {path}: {old_value!r} -> {new_value!r}")

    def give_up(
        self,
        code: DiagnosticCode,
        message: str,
        path: str,
        suggestion: str | None = None,
    ) -> None:
        self.unfixable.append(Diagnostic(code, message, path, suggestion=suggestion))

    # -------------------------------------------------------------------------
    # Document level
    # -------------------------------------------------------------------------

    def document(self, raw: Any) -> dict[str, Any]:
        if not isinstance(raw, Mapping):
            self.give_up(
                DiagnosticCode.INVALID_TYPE,
                f"Schema must be an object, got {kind_of(raw)}",
                "",
            )
            return self.fixer.default_document()

        fixed: dict[str, Any] = {
            key: self.copy(value)
            for key, value in raw.items()
            if key not in ("version", "root")
        }

        version = raw.get("version")
        if isinstance(version, str) and version.strip():
            fixed["version"] = version
        else:
            fixed["version"] = self.config.default_version
            self.record(
                FixKind.ADD_VERSION,
                "version",
                version,
                self.config.default_version,
                Confidence.HIGH,
                f'Added missing version "{self.config.default_version}"',
            )

        root = raw.get("root")
        if isinstance(root, Mapping):
            self.collect_ids(root, 1)
            fixed["root"] = self.node(root, "root", 1)
        else:
            fixed["root"] = self.fixer.default_root()
            self.record(
                FixKind.ADD_ROOT,
                "root",
                root,
                self.fixer.default_root(),
                Confidence.HIGH,
                f'Created default {self.config.default_root_type} root',
            )
        return fixed

    def collect_ids(self, node: Mapping[str, Any], depth: int) -> None:
        """Reserve every existing id so synthesized ids never collide."""
        if depth > self.config.max_depth or id(node) in self.ancestors:
            return
        node_id = node.get("id")
        if isinstance(node_id, str) and node_id.strip():
            self.taken_ids.add(node_id)
        children = node.get("children")
        if not isinstance(children, (list, tuple)):
            return
        self.ancestors.add(id(node))
        try:
            for child in children:
                if isinstance(child, Mapping):
                    self.collect_ids(child, depth + 1)
        finally:
            self.ancestors.discard(id(node))

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def node(self, node: Mapping[str, Any], path: str, depth: int) -> dict[str, Any]:
        fixed: dict[str, Any] = {
            key: self.copy(value)
            for key, value in node.items()
            if key not in ("id", "type", "props", "children")
        }

        canonical = self.fix_type(node, fixed, path)
        self.fix_id(node, fixed, path)
        self.fix_props(node, fixed, canonical, path)

        if "children" in node and node["children"] is None:
            # Null children mean no children
            fixed["children"] = None
        elif "children" in node:
            self.ancestors.add(id(node))
            try:
                fixed["children"] = self.children(node["children"], path, depth)
            finally:
                self.ancestors.discard(id(node))
        return fixed

    def fix_type(
        self, node: Mapping[str, Any], fixed: dict[str, Any], path: str
    ) -> str | None:
        """Copy or correct the node type; return the canonical name if known."""
        if "type" not in node:
            self.give_up(
                DiagnosticCode.MISSING_FIELD, f'Missing required field: type at "{path}"', path
            )
            return None

        component_type = node["type"]
        fixed["type"] = self.copy(component_type)
        if not isinstance(component_type, str):
            self.give_up(
                DiagnosticCode.INVALID_TYPE,
                f'Field "type" must be a string at "{path}", got {kind_of(component_type)}',
                f"{path}.type",
            )
            return None

        canonical = self.catalog.resolve(component_type)
        if canonical is not None:
            if canonical != component_type and self.config.resolve_aliases:
                fixed["type"] = canonical
                self.record(
                    FixKind.RESOLVE_ALIAS,
                    f"{path}.type",
                    component_type,
                    canonical,
                    Confidence.HIGH,
                    f'Resolved alias "{component_type}" to "{canonical}"',
                )
            return canonical

        match = self.closest(component_type, self.catalog.get_valid_types())
        if match is None:
            self.give_up(
                DiagnosticCode.UNKNOWN_COMPONENT,
                f'Unknown component type "{component_type}" at "{path}"',
                f"{path}.type",
                "No sufficiently similar component type found",
            )
            return None

        fixed["type"] = match.candidate
        self.record(
            FixKind.FIX_TYPE,
            f"{path}.type",
            component_type,
            match.candidate,
            self.config.confidence_for(match.score),
            f'Replaced unknown type "{component_type}" with "{match.candidate}" '
            f"(similarity: {match.score:.0%})",
        )
        return match.candidate

    def fix_id(self, node: Mapping[str, Any], fixed: dict[str, Any], path: str) -> None:
        node_id = node.get("id")
        slug_source = fixed.get("type")

        if not isinstance(node_id, str) or not node_id.strip():
            new_id = self.next_id(slug_source)
            fixed["id"] = new_id
            self.record(
                FixKind.ADD_ID,
                f"{path}.id",
                node_id,
                new_id,
                Confidence.HIGH,
                f'Added missing id "{new_id}"',
            )
            return

        if node_id in self.assigned_ids:
            new_id = self.next_id(slug_source)
            fixed["id"] = new_id
            self.record(
                FixKind.FIX_DUPLICATE_ID,
                f"{path}.id",
                node_id,
                new_id,
                Confidence.MEDIUM,
                f'Renamed duplicate id "{node_id}" to "{new_id}"',
            )
            return

        fixed["id"] = node_id
        self.assigned_ids.add(node_id)

    def next_id(self, component_type: Any) -> str:
        """Synthesize an id that is unused anywhere in the document."""
        slug = ""
        if isinstance(component_type, str):
            slug = _SLUG_SEPARATORS.sub("-", component_type.lower()).strip("-")
        slug = slug or "component"
        suffix = f"-{self.config.id_suffix}" if self.config.id_suffix else ""

        while True:
            self.counter += 1
            candidate = f"{slug}-{self.counter}{suffix}"
            if candidate not in self.taken_ids and candidate not in self.assigned_ids:
                self.assigned_ids.add(candidate)
                return candidate

    def fix_props(
        self,
        node: Mapping[str, Any],
        fixed: dict[str, Any],
        canonical: str | None,
        path: str,
    ) -> None:
        raw_props = node.get("props")
        props: dict[str, Any] = {}
        if isinstance(raw_props, Mapping):
            props = {key: self.copy(value) for key, value in raw_props.items()}
        fixed["props"] = props

        schemas = self.catalog.get_property_schema(canonical) if canonical else None
        if not schemas:
            return

        for name, schema in schemas.items():
            value = props.get(name)
            at = prop_path(path, name)

            if value is None:
                if schema.required and schema.default_value is not None:
                    props[name] = self.copy(schema.default_value)
                    self.record(
                        FixKind.ADD_DEFAULT_PROP,
                        at,
                        value,
                        schema.default_value,
                        Confidence.MEDIUM,
                        f'Added missing required property "{name}" '
                        f"with default {schema.default_value!r}",
                    )
                continue

            allowed = schema.allowed_values
            if not allowed or not isinstance(value, str) or value in allowed:
                continue
            match = self.closest(value, allowed)
            if match is None:
                # Left for the validator to report
                continue
            props[name] = match.candidate
            self.record(
                FixKind.FIX_ENUM,
                at,
                value,
                match.candidate,
                self.config.confidence_for(match.score),
                f'Replaced invalid value "{value}" for "{name}" with "{match.candidate}" '
                f"(similarity: {match.score:.0%})",
            )

    def children(self, children: Any, path: str, depth: int) -> Any:
        if not isinstance(children, (list, tuple)):
            self.give_up(
                DiagnosticCode.INVALID_TYPE,
                f'Field "children" must be an array at "{path}", got {kind_of(children)}',
                f"{path}.children",
            )
            return self.copy(children)

        fixed: list[Any] = []
        for index, child in enumerate(children):
            at = child_path(path, index)
            if isinstance(child, str):
                fixed.append(child)
            elif not isinstance(child, Mapping):
                self.give_up(
                    DiagnosticCode.INVALID_TYPE,
                    f'Child at "{at}" must be a component object or text, '
                    f"got {kind_of(child)}",
                    at,
                )
                fixed.append(self.copy(child))
            elif id(child) in self.ancestors:
                self.give_up(
                    DiagnosticCode.INVALID_STRUCTURE,
                    f'Cycle detected: component at "{at}" contains itself; child removed',
                    at,
                )
            elif depth + 1 > self.config.max_depth:
                self.give_up(
                    DiagnosticCode.INVALID_STRUCTURE,
                    f"Maximum nesting depth {self.config.max_depth} exceeded at \"{at}\"; "
                    "subtree copied unrepaired",
                    at,
                )
                fixed.append(self.copy(child))
            else:
                fixed.append(self.node(child, at, depth + 1))
        return fixed

    def closest(self, value: str, candidates: Any) -> Match | None:
        return find_closest(value, candidates, self.config.medium_threshold)


def _clone(value: Any) -> Any:
    """Copy nested mappings and sequences with an explicit stack.

    Unlike `copy.deepcopy` this never recurses, so subtrees of any depth can
    be carried over. Mappings become dicts and tuples become lists; scalars
    and other objects are shared. Shared and cyclic references are kept
    shared in the copy.
    """
    if not isinstance(value, (Mapping, list, tuple)):
        return value

    copies: dict[int, Any] = {}

    def container_for(source: Any) -> tuple[Any, bool]:
        existing = copies.get(id(source))
        if existing is not None:
            return existing, False
        target: Any = {} if isinstance(source, Mapping) else []
        copies[id(source)] = target
        return target, True

    root, _ = container_for(value)
    pending: list[tuple[Any, Any]] = [(value, root)]
    while pending:
        source, target = pending.pop()
        items = source.items() if isinstance(source, Mapping) else enumerate(source)
        for key, item in items:
            if isinstance(item, (Mapping, list, tuple)):
                copied, created = container_for(item)
                if created:
                    pending.append((item, copied))
            else:
                copied = item
            if isinstance(target, dict):
                target[key] = copied
            else:
                target.append(copied)
    return root


def fix_ui_description(
    raw: Any, catalog: ComponentCatalog, config: FixerConfig | None = None
) -> FixResult:
    """Repair a UI description with a one-off SchemaFixer.

    Example:
        >>> result = fix_ui_description({"root": {"type": "btn"}}, catalog)
        >>> result.fixed["root"]["type"]
        'Button'
    """
    return SchemaFixer(catalog, config).fix(raw)


def needs_fix(raw: Any, catalog: ComponentCatalog) -> bool:
    """Check if the fixer would change a UI description."""
    return SchemaFixer(catalog).can_fix(raw)


__all__ = [
    "FixerConfig",
    "SchemaFixer",
    "fix_ui_description",
    "needs_fix",
]
