"""Parser engine: applies every configured column rule to a row."""
from typing import Any, Iterable, Iterator, Mapping, Union

import structlog

from supplier_rules.engine.bag import PropertyBag
from supplier_rules.engine.chain import ChainExecutor
from supplier_rules.engine.context import CellContext
from supplier_rules.models.parser_config import ParserConfig
from supplier_rules.models.row import ParseResult, RowData

logger = structlog.get_logger(__name__)


class ParserEngine:
    """Row parser built from one supplier's parser configuration.

    Construction resolves lookups and builds one chain per configured column
    (raising ``ConfigurationError`` for invalid rules). A built engine holds
    only read-only state and may be shared between threads; every ``parse``
    call uses its own property bag.

    Example:
        engine = ParserEngine(supplier.parser_config)
        result = engine.parse(RowData(index=0, cells={"C": "CHANEL:MENS:T123"}))
        result.values["Brand"]  # "CHANEL"
    """

    def __init__(self, config: ParserConfig):
        self.config = config
        self.lookups = config.resolved_lookups
        self.chains = [
            (column, ChainExecutor(rule, self.lookups, column=column))
            for column, rule in config.column_rules.items()
        ]
        logger.debug(
            "parser_engine_built",
            columns=[column for column, _ in self.chains],
            lookup_tables=len(self.lookups),
        )

    def parse(self, row: Union[RowData, Mapping[str, Any]], row_index: int = 0) -> ParseResult:
        """Parse one row into property assignments.

        Args:
            row: Row data, or a plain ``column -> cell`` mapping
            row_index: Index used when ``row`` is a plain mapping

        Returns:
            ParseResult with assigned values, trace and bag snapshot
        """
        if not isinstance(row, RowData):
            row = RowData.from_mapping(row_index, row)

        settings = self.config.settings
        bag = PropertyBag()
        result = ParseResult(row_index=row.index)
        log = logger.bind(row_index=row.index)

        for column, chain in self.chains:
            ctx = CellContext(
                column=column,
                raw=row.get_cell(column),
                culture=settings.default_culture,
                bag=bag,
            )
            chain_result = chain.execute(ctx)

            for assignment in chain_result.assignments:
                if settings.prefer_first_assignment and assignment.prop in result.values:
                    continue
                result.values[assignment.prop] = assignment.value

            result.trace.append(
                f"{column}: matched={chain_result.matched} "
                f"actions={len(chain)} assignments={len(chain_result.assignments)}"
            )
            result.trace.extend(chain_result.trace)

            if chain_result.matched:
                result.matched = True
                if settings.stop_on_first_match:
                    log.debug("parse_stopped_on_first_match", column=column)
                    break

        result.variables = bag.snapshot()
        log.debug(
            "row_parsed",
            matched=result.matched,
            values=len(result.values),
        )
        return result

    def parse_rows(self, rows: Iterable[Union[RowData, Mapping[str, Any]]]) -> Iterator[ParseResult]:
        """Lazily parse ``rows``; plain mappings are indexed by position."""
        for index, row in enumerate(rows):
            yield self.parse(row, row_index=index)
