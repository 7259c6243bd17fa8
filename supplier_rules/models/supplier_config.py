"""Pydantic models for the global suppliers configuration document."""
from typing import Any, Dict, List, Optional

import structlog
from pydantic import Field, field_validator

from supplier_rules.engine.lookups import validate_lookup_tables
from supplier_rules.models.base import ConfigModel
from supplier_rules.models.parser_config import ParserConfig

logger = structlog.get_logger(__name__)


class SupplierConfiguration(ConfigModel):
    """One supplier and its parser configuration."""

    name: str = Field(
        default="",
        description="Supplier display name (unique, case-insensitive)"
    )
    currency: str = Field(
        default="$",
        description="Currency symbol of the supplier's prices"
    )
    parser_config: Optional[ParserConfig] = Field(
        default=None,
        description="Column rules of this supplier; None when not yet configured"
    )

    @field_validator("name", "currency", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    def update_from(self, source: "SupplierConfiguration") -> None:
        """Copy ``source`` into this supplier, keeping the parser config object."""
        self.name = source.name
        self.currency = source.currency
        if source.parser_config is None:
            self.parser_config = None
        elif self.parser_config is None:
            self.parser_config = source.parser_config.model_copy(deep=True)
        else:
            self.parser_config.apply_from(source.parser_config)


class SuppliersConfiguration(ConfigModel):
    """Root configuration document: global lookups plus every supplier.

    Global ``lookups`` are layered under each supplier's own lookups by
    ``merge_all_lookups``; every parser configuration keeps its own resolved
    table set.
    """

    version: str = Field(
        default="1.0",
        description="Configuration document version"
    )
    lookups: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Global lookup tables shared by all suppliers"
    )
    suppliers: List[SupplierConfiguration] = Field(
        default_factory=list,
        description="Supplier configurations in file order"
    )

    @field_validator("lookups", "suppliers", mode="before")
    @classmethod
    def not_null(cls, v: Any, info) -> Any:
        if v is None:
            return {} if info.field_name == "lookups" else []
        return v

    @field_validator("version", mode="before")
    @classmethod
    def version_text(cls, v: Any) -> str:
        return "1.0" if v is None else str(v)

    def find_supplier(self, name: str) -> Optional[SupplierConfiguration]:
        """Supplier named ``name`` (case-insensitive, surrounding blanks ignored)."""
        wanted = (name or "").strip().lower()
        for supplier in self.suppliers:
            if supplier.name.lower() == wanted:
                return supplier
        return None

    def remove_supplier(self, name: str) -> bool:
        """Remove the supplier named ``name``; False when there is none."""
        supplier = self.find_supplier(name)
        if supplier is None:
            return False
        self.suppliers.remove(supplier)
        logger.info("supplier_removed", supplier=supplier.name)
        return True

    def merge_all_lookups(self) -> None:
        """Resolve the lookup tables of every configured parser."""
        for supplier in self.suppliers:
            if supplier.parser_config is not None:
                supplier.parser_config.merge_lookups(self.lookups)
        logger.debug(
            "supplier_lookups_merged",
            suppliers=len(self.suppliers),
            global_tables=len(self.lookups),
        )

    def validate_configuration(self) -> List[str]:
        """Return structural error messages; an empty list means valid."""
        errors = [f"lookups: {message}" for message in validate_lookup_tables(self.lookups)]
        seen = set()
        for index, supplier in enumerate(self.suppliers):
            if not supplier.name:
                errors.append(f"Supplier at index {index} has empty name")
                continue
            if supplier.name.lower() in seen:
                errors.append(f"Duplicate supplier name '{supplier.name}'")
            seen.add(supplier.name.lower())
            if supplier.parser_config is not None:
                errors.extend(
                    f"Supplier '{supplier.name}': {message}"
                    for message in supplier.parser_config.validate_configuration()
                )
        return errors

    def apply_from(self, source: "SuppliersConfiguration") -> None:
        """Update this document in place from ``source``.

        The global lookup dict, supplier objects and parser configurations
        already held by callers are kept by identity. Suppliers absent from
        ``source`` are removed. Resolved lookups are re-merged afterwards.
        """
        self.version = source.version

        self.lookups.clear()
        for table_name, entries in source.lookups.items():
            self.lookups[table_name] = dict(entries)

        incoming = {supplier.name.lower(): supplier for supplier in source.suppliers if supplier.name}
        kept: List[SupplierConfiguration] = []
        for supplier in self.suppliers:
            update = incoming.pop(supplier.name.lower(), None)
            if update is None:
                logger.info("supplier_removed", supplier=supplier.name)
                continue
            supplier.update_from(update)
            kept.append(supplier)
        for supplier in source.suppliers:
            if supplier.name and supplier.name.lower() in incoming:
                kept.append(supplier.model_copy(deep=True))
        self.suppliers[:] = kept

        self.merge_all_lookups()
