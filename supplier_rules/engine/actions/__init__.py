"""Chain actions and the factory that builds them from descriptors."""
from supplier_rules.engine.actions.assign import AssignAction
from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.actions.conditional import ConditionalAction
from supplier_rules.engine.actions.factory import ACTION_REGISTRY, compile_pattern, create_action
from supplier_rules.engine.actions.find import FindAction
from supplier_rules.engine.actions.mapping import MapAction
from supplier_rules.engine.actions.noop import NoopAction
from supplier_rules.engine.actions.split import SplitAction

__all__ = [
    "ACTION_REGISTRY",
    "ActionResult",
    "AssignAction",
    "ChainAction",
    "ConditionalAction",
    "FindAction",
    "MapAction",
    "NoopAction",
    "SplitAction",
    "compile_pattern",
    "create_action",
]
