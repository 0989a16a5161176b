"""LibCST adapter: parsing, scopes, binding identifiers, renaming and rendering.

LibCST trees are immutable, so a :class:`Program` records renames in a table
keyed by ``Name`` node identity and applies that table whenever source text is
produced, either for one scope (context excerpts) or for the whole module.
"""

import builtins
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

import libcst as cst
import libcst.metadata as meta
from libcst.metadata import (
    Assignment,
    ClassScope,
    GlobalScope,
    ImportAssignment,
    MetadataWrapper,
    PositionProvider,
    ScopeProvider,
)

from .errors import GenerationError, ParseError

logger = logging.getLogger(__name__)

BindingKey = Tuple[meta.Scope, str]


@dataclass(frozen=True)
class BindingIdentifier:
    """A declaration site captured before any rename happens."""

    name: str
    start: Optional[int]
    end: Optional[int]
    scope: "Scope"
    node: cst.Name = field(repr=False, compare=False)


class Scope:
    def __init__(self, program: "Program", scope: meta.Scope):
        self._program = program
        self._scope = scope

    @property
    def is_root(self) -> bool:
        return isinstance(self._scope, GlobalScope)

    @property
    def parent(self) -> Optional["Scope"]:
        if self.is_root:
            return None
        return self._program.scope_for(self._scope.parent)

    @property
    def node(self) -> cst.CSTNode:
        if self.is_root:
            return self._program.module
        return self._scope.node

    def declared_names(self) -> Set[str]:
        return {assignment.name for assignment in self._scope.assignments}

    def code(self) -> str:
        """Source of this scope with every rename so far applied."""
        return self._program.code_for(self.node)

    def rename(self, old_name: str, new_name: str) -> None:
        """Rename the binding ``old_name`` declared here, with all its references.

        Same-named bindings of other scopes are left alone; references from
        nested scopes, ``global`` and ``nonlocal`` statements follow.
        """
        self._program.rename_binding(self._scope, old_name, new_name)

    def __repr__(self):
        kind = type(self._scope).__name__
        name = getattr(self._scope, "name", None)
        return f"<Scope {kind} {name}>" if name else f"<Scope {kind}>"


class _RenameTransformer(cst.CSTTransformer):
    def __init__(self, renames: Dict[cst.Name, str], bare_imports: Set[cst.Name]):
        super().__init__()
        self._renames = renames
        self._bare_imports = bare_imports

    def leave_Name(self, original_node: cst.Name, updated_node: cst.Name) -> cst.Name:
        new_name = self._renames.get(original_node)
        # `import json` keeps the module name; the binding moves to an alias
        if new_name is None or original_node in self._bare_imports:
            return updated_node
        return updated_node.with_changes(value=new_name)

    def leave_ImportAlias(self, original_node: cst.ImportAlias, updated_node: cst.ImportAlias) -> cst.ImportAlias:
        new_name = self._renames.get(original_node.name)
        if new_name is None or original_node.asname is not None:
            return updated_node
        if new_name == original_node.name.value:
            return updated_node
        return updated_node.with_changes(asname=cst.AsName(name=cst.Name(new_name)))


class _ScopeDeclarationCollector(cst.CSTVisitor):
    def __init__(self):
        super().__init__()
        self.declarations: List[Tuple[cst.CSTNode, cst.Name]] = []

    def visit_Global(self, node: cst.Global) -> bool:
        self.declarations.extend((node, item.name) for item in node.names)
        return False

    def visit_Nonlocal(self, node: cst.Nonlocal) -> bool:
        self.declarations.extend((node, item.name) for item in node.names)
        return False


class _KeywordArgumentCollector(cst.CSTVisitor):
    def __init__(self):
        super().__init__()
        self.keywords: Set[str] = set()

    def visit_Arg(self, node: cst.Arg) -> None:
        if node.keyword is not None:
            self.keywords.add(node.keyword.value)


class _DefinitionCollector(cst.CSTVisitor):
    def __init__(self, definitions: Dict[cst.Name, BindingKey]):
        super().__init__()
        self._definitions = definitions
        self.found: List[cst.Name] = []

    def visit_Name(self, node: cst.Name) -> None:
        if node in self._definitions:
            self.found.append(node)


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _leftmost_name(node: cst.CSTNode) -> Optional[cst.Name]:
    while isinstance(node, cst.Attribute):
        node = node.value
    return node if isinstance(node, cst.Name) else None


def _exported_names(module: cst.Module) -> Set[str]:
    """String entries of a module-level `__all__` list or tuple."""
    exported: Set[str] = set()
    for statement in module.body:
        if not isinstance(statement, cst.SimpleStatementLine):
            continue
        for small in statement.body:
            if isinstance(small, cst.Assign):
                targets = [target.target for target in small.targets]
            elif isinstance(small, (cst.AugAssign, cst.AnnAssign)):
                targets = [small.target]
            else:
                continue
            if not any(isinstance(target, cst.Name) and target.value == "__all__" for target in targets):
                continue
            if not isinstance(small.value, (cst.List, cst.Tuple)):
                continue
            for element in small.value.elements:
                if isinstance(element.value, cst.SimpleString):
                    exported.add(element.value.evaluated_value)
    return exported


def _line_offsets(code: str) -> List[int]:
    offsets = [0]
    for index, char in enumerate(code):
        if char == "\n":
            offsets.append(index + 1)
    return offsets


class Program:
    """A parsed module plus its scope analysis and pending renames."""

    def __init__(self, module: cst.Module):
        self._wrapper = MetadataWrapper(module)
        self.module = self._wrapper.module
        self._scopes = self._wrapper.resolve(ScopeProvider)
        self._positions = self._wrapper.resolve(PositionProvider)
        self._line_starts = _line_offsets(self.module.code)
        self._renames: Dict[cst.Name, str] = {}
        self._wrappers: Dict[meta.Scope, Scope] = {}
        self._definitions: Dict[cst.Name, BindingKey] = {}
        self._targets: Dict[BindingKey, List[cst.Name]] = defaultdict(list)
        self._bare_imports: Set[cst.Name] = set()
        # names left in place by the pass, which no final name may shadow
        self.reserved_names: Set[str] = set(dir(builtins))
        self._index_bindings()
        self.root = self.scope_for(self._scopes[self.module])

    def scope_for(self, scope: meta.Scope) -> Scope:
        wrapper = self._wrappers.get(scope)
        if wrapper is None:
            wrapper = self._wrappers[scope] = Scope(self, scope)
        return wrapper

    def _definition_name(self, assignment: Assignment) -> Optional[cst.Name]:
        if isinstance(assignment, ImportAssignment):
            as_name = assignment.as_name
            if not isinstance(as_name, cst.Name):
                return None
            for alias in assignment.node.names:
                if alias.name is as_name:
                    self._bare_imports.add(as_name)
            return as_name
        node = assignment.node
        if isinstance(node, cst.Name):
            return node
        if isinstance(node, (cst.FunctionDef, cst.ClassDef, cst.Param)):
            return node.name
        return None

    def _index_bindings(self) -> None:
        pinned: Set[BindingKey] = set()
        scopes = {scope for scope in self._scopes.values() if scope is not None}
        keywords = _KeywordArgumentCollector()
        self.module.visit(keywords)
        exported = _exported_names(self.module)
        for scope in scopes:
            for assignment in scope.assignments:
                if not isinstance(assignment, Assignment):
                    continue
                key = (assignment.scope, assignment.name)
                definition = self._definition_name(assignment)
                if (
                    definition is None
                    or isinstance(assignment.scope, ClassScope)
                    or "." in assignment.name
                    or _is_dunder(assignment.name)
                    # `f(a=1)` names the parameter from the call site
                    or (isinstance(assignment.node, cst.Param) and assignment.name in keywords.keywords)
                    or (isinstance(assignment.scope, GlobalScope) and assignment.name in exported)
                ):
                    pinned.add(key)
                    continue
                self._definitions[definition] = key
                self._targets[key].append(definition)
                for access in assignment.references:
                    reference = _leftmost_name(access.node)
                    if reference is None or reference.value != assignment.name:
                        # string annotations cannot be rewritten as a Name
                        pinned.add(key)
                        continue
                    self._targets[key].append(reference)

            for access in scope.accesses:
                if any(isinstance(referent, Assignment) for referent in access.referents):
                    continue
                reference = _leftmost_name(access.node)
                if reference is not None:
                    self.reserved_names.add(reference.value)

        declarations = _ScopeDeclarationCollector()
        self.module.visit(declarations)
        for statement, name in declarations.declarations:
            scope = self._scopes.get(statement)
            if scope is None:
                continue
            owners = {
                assignment.scope
                for assignment in scope[name.value]
                if isinstance(assignment, Assignment)
            }
            for owner in owners:
                self._targets[(owner, name.value)].append(name)

        for definition, key in list(self._definitions.items()):
            if key in pinned:
                del self._definitions[definition]
        self.reserved_names.update(name.split(".")[0] for _, name in pinned)
        logger.debug(
            "indexed %d declaration sites, %d bindings pinned", len(self._definitions), len(pinned)
        )

    def _offset(self, position: meta.CodePosition) -> Optional[int]:
        if position.line < 1 or position.line > len(self._line_starts):
            return None
        return self._line_starts[position.line - 1] + position.column

    def binding_identifiers(self) -> Iterator[BindingIdentifier]:
        """Yield declaration sites in source order."""
        collector = _DefinitionCollector(self._definitions)
        self.module.visit(collector)
        for node in collector.found:
            owner, name = self._definitions[node]
            code_range = self._positions.get(node)
            start = end = None
            if code_range is not None:
                start = self._offset(code_range.start)
                end = self._offset(code_range.end)
            yield BindingIdentifier(
                name=name, start=start, end=end, scope=self.scope_for(owner), node=node
            )

    def rename_binding(self, scope: meta.Scope, old_name: str, new_name: str) -> None:
        targets = self._targets.get((scope, old_name))
        if not targets:
            raise ValueError(f"{old_name!r} is not declared in {self.scope_for(scope)!r}")
        for node in targets:
            self._renames[node] = new_name

    def code_for(self, node: cst.CSTNode) -> str:
        transformer = _RenameTransformer(self._renames, self._bare_imports)
        if node is self.module:
            return self.module.visit(transformer).code
        return self.module.code_for_node(node.visit(transformer))


def parse(code: str) -> Program:
    try:
        module = cst.parse_module(code)
    except cst.ParserSyntaxError as exc:
        raise ParseError(f"failed to parse code: {exc}") from exc
    try:
        return Program(module)
    except NotImplementedError as exc:
        # scope analysis rejects declarations Python itself refuses, e.g. a module-level nonlocal
        raise ParseError(f"failed to analyse scopes: {exc}") from exc


def render(program: Program) -> str:
    """Print the renamed module and make sure it still parses."""
    try:
        code = program.code_for(program.module)
        cst.parse_module(code)
    except (cst.ParserSyntaxError, cst.CSTValidationError) as exc:
        raise GenerationError(f"failed to stringify code: {exc}") from exc
    return code
